"""Writing help for organisers and reviewers.

The backend is pluggable through ``settings.EVENT_ASSISTANT_BACKEND``; any failure
of the backend surfaces as :class:`ExternalServiceError`.
"""

import typing as t

import openai
import structlog
from django.conf import settings
from django.utils.module_loading import import_string

from events.models import Venue

from .exceptions import ExternalServiceError
from .llms.llm_interfaces import (
    DescriptionRequest,
    EventAssistant,
    RecommendationRequest,
    Recommendations,
    ReviewFeedbackRequest,
    VenueOption,
)

logger = structlog.get_logger(__name__)

T = t.TypeVar("T")


def get_assistant() -> EventAssistant:
    backend_class = import_string(settings.EVENT_ASSISTANT_BACKEND)
    return t.cast(EventAssistant, backend_class())


def _run(operation: str, call: t.Callable[[], T]) -> T:
    try:
        return call()
    except (openai.OpenAIError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        logger.exception("assistant_backend_failed", operation=operation, backend=settings.EVENT_ASSISTANT_BACKEND)
        raise ExternalServiceError(f"The assistant could not complete '{operation}'.") from e


def generate_description(
    title: str, category: str = "", attendees: int | None = None, venue: str | None = None
) -> str:
    """Draft an event description from its title and basic facts."""
    request = DescriptionRequest(title=title, category=category, attendees=attendees, venue=venue)
    response = _run("description", lambda: get_assistant().generate_description(request))
    logger.info("assistant_description_generated", title=title)
    return response.description


def generate_review_feedback(
    event_title: str,
    action: t.Literal["approved", "changes_required", "rejected"],
    description: str = "",
    category: str = "",
    attendees: int | None = None,
    risk_notes: str = "",
) -> str:
    """Draft the comment a reviewer sends with a decision."""
    request = ReviewFeedbackRequest(
        event_title=event_title,
        action=action,
        description=description,
        category=category,
        attendees=attendees,
        risk_notes=risk_notes,
    )
    response = _run("review_feedback", lambda: get_assistant().generate_review_feedback(request))
    logger.info("assistant_feedback_generated", action=action)
    return response.feedback


def recommend(
    title: str, category: str = "", description: str = "", venues: t.Sequence[VenueOption] | None = None
) -> Recommendations:
    """Suggest a venue, an attendance estimate, risks and improvements.

    Without an explicit venue list every active venue is considered.
    """
    if venues is None:
        venues = [
            VenueOption(name=v.name, capacity=v.capacity, location=v.location, amenities=list(v.amenities or []))
            for v in Venue.objects.filter(active=True).order_by("name")
        ]
    request = RecommendationRequest(title=title, category=category, description=description, venues=list(venues))
    response = _run("recommendations", lambda: get_assistant().recommend(request))
    logger.info("assistant_recommendations_generated", title=title, venues=len(request.venues))
    return response.recommendations
