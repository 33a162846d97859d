"""Event authoring: drafts, edits, comments and club templates.

Status changes are not made here; see ``events.service.workflow``.
"""

import typing as t
from datetime import datetime
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import capabilities_for
from common import audit
from events import schema
from events.exceptions import AuthorizationError, PreconditionError
from events.models import Club, Event, EventComment, EventTemplate, Venue
from events.service import workflow
from notifications.service import notification_helpers

logger = structlog.get_logger(__name__)

EVENT_CONTENT_FIELDS = (
    "venue_id",
    "title",
    "description",
    "category",
    "start",
    "end",
    "expected_attendees",
    "risk_notes",
    "policy_ack",
)


def _snapshot(event: Event, fields: t.Iterable[str]) -> dict[str, t.Any]:
    snapshot = {}
    for name in fields:
        value = getattr(event, name)
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, UUID):
            value = str(value)
        snapshot[name] = value
    return snapshot


def _get_venue(venue_id: t.Any) -> Venue:
    try:
        return Venue.objects.get(pk=venue_id)
    except Venue.DoesNotExist:
        raise ValidationError({"venue_id": [_("Unknown venue.")]})


def create_event(club: Club, creator: ClubUser, payload: schema.EventCreateSchema, submit: bool = False) -> Event:
    """Create a draft for ``club`` and optionally send it straight into review.

    Validation failures (window, acknowledgements, capacity, opening hours)
    raise before anything is written. When ``submit`` is set and the submission
    fails, the draft is not kept either.
    """
    if not capabilities_for(creator).can_create(club.pk):
        raise AuthorizationError(_("You cannot create events for this club."))
    if not club.active:
        raise PreconditionError(_("This club is not active."))

    data = payload.model_dump(exclude={"club_id", "submit"})
    data["policy_ack"] = payload.policy_ack.model_dump()
    venue = _get_venue(data.pop("venue_id"))
    submit = submit or payload.submit

    with transaction.atomic():
        event = Event(club=club, venue=venue, created_by=creator, updated_by=creator, **data)
        event.save()
        audit.record(
            actor=creator, instance=event, action="event_created", after=_snapshot(event, EVENT_CONTENT_FIELDS)
        )
        if submit:
            workflow.submit_event(event, creator)

    logger.info("event_created", event_id=str(event.pk), club_id=str(club.pk), submitted=submit)
    event.refresh_from_db()
    return event


@transaction.atomic
def update_event(event: Event, actor: ClubUser, payload: schema.EventEditSchema) -> Event:
    """Edit the content of a draft or of an event sent back for changes."""
    if event.created_by_id != actor.pk:
        raise AuthorizationError(_("Only the creator can edit this event."))

    event = Event.objects.select_for_update().get(pk=event.pk)
    if not workflow.is_editable_status(event.status):
        raise PreconditionError(_("Events can only be edited while in draft or when changes were requested."))

    # An explicit null leaves the field as it is.
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "venue_id" in data:
        data["venue"] = _get_venue(data.pop("venue_id"))

    fields = [("venue_id" if key == "venue" else key) for key in data]
    before = _snapshot(event, fields)
    for key, value in data.items():
        setattr(event, key, value)
    event.updated_by = actor
    event.save()
    audit.record(actor=actor, instance=event, action="event_updated", before=before, after=_snapshot(event, fields))
    return event


# Comments


def add_comment(event: Event, author: ClubUser, body: str) -> EventComment:
    """Comment on an event. The creator is notified unless they wrote it."""
    with transaction.atomic():
        comment = EventComment.objects.create(event=event, author=author, body=body)
        notification_helpers.notify_comment_added(comment)
    logger.info("event_comment_added", event_id=str(event.pk), comment_id=str(comment.pk), author_id=str(author.pk))
    return comment


def list_comments(event: Event) -> QuerySet[EventComment]:
    return EventComment.objects.filter(event=event).select_related("author").order_by("created_at")


# Templates


def _require_creator(actor: ClubUser, club_id: t.Any) -> None:
    if not capabilities_for(actor).can_create(club_id):
        raise AuthorizationError(_("You cannot manage templates for this club."))


def create_template(club: Club, actor: ClubUser, payload: schema.EventTemplateCreateSchema) -> EventTemplate:
    """Save a reusable prefill for the club's event form."""
    _require_creator(actor, club.pk)
    template = EventTemplate.objects.create(club=club, created_by=actor, **payload.model_dump())
    logger.info("event_template_created", template_id=str(template.pk), club_id=str(club.pk))
    return template


def list_templates(club: Club) -> QuerySet[EventTemplate]:
    return EventTemplate.objects.filter(club=club).order_by("name")


def delete_template(template: EventTemplate, actor: ClubUser) -> None:
    _require_creator(actor, template.club_id)
    template_id = template.pk
    template.delete()
    logger.info("event_template_deleted", template_id=str(template_id), club_id=str(template.club_id))
