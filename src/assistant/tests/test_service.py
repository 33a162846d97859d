from unittest import mock

import openai
import pytest

from assistant import service
from assistant.exceptions import ExternalServiceError
from assistant.llms import ChatGPTAssistant, MockAssistant
from assistant.llms.llm_interfaces import (
    DescriptionRequest,
    DescriptionResponse,
    RecommendationRequest,
    ReviewFeedbackRequest,
    ReviewFeedbackResponse,
    VenueOption,
)
from events.models import Venue


def test_backend_comes_from_settings() -> None:
    assert isinstance(service.get_assistant(), MockAssistant)


def test_generate_description() -> None:
    text = service.generate_description("Robot Fight Night", category="Competition", attendees=80, venue="Main Hall")

    assert text == (
        "Join us for Robot Fight Night, a competition event at Main Hall. We are expecting around 80 attendees."
    )


@pytest.mark.parametrize(
    "action,expected",
    [
        ("approved", '"Quiz Night" is approved. Thank you for the thorough proposal.'),
        (
            "changes_required",
            '"Quiz Night" needs a few changes before it can be approved. '
            "Please describe the risks and how you will manage them.",
        ),
    ],
)
def test_generate_review_feedback(action: str, expected: str) -> None:
    assert service.generate_review_feedback("Quiz Night", action) == expected  # type: ignore[arg-type]


def test_feedback_with_risk_notes_skips_the_reminder() -> None:
    feedback = service.generate_review_feedback("Quiz Night", "rejected", risk_notes="First aid on site.")
    assert feedback == '"Quiz Night" cannot be approved in its current form.'


def test_recommend_with_explicit_venues() -> None:
    venues = [VenueOption(name="Lab", capacity=30), VenueOption(name="Hall", capacity=300)]

    result = service.recommend("Hackathon", venues=venues)

    assert result.suggested_venue == "Hall"
    assert result.estimated_attendance == "Up to 300"
    assert "Add a description so members know what to expect." in result.improvement_tips


@pytest.mark.django_db
def test_recommend_defaults_to_active_venues(venue: Venue, small_venue: Venue) -> None:
    venue.active = False
    venue.save()

    result = service.recommend("Hackathon", description="Build things.")

    assert result.suggested_venue == "Seminar Room"
    assert result.improvement_tips == ["Publish the event at least two weeks ahead."]


@pytest.mark.django_db
def test_recommend_without_venues() -> None:
    result = service.recommend("Hackathon")

    assert result.suggested_venue is None
    assert result.estimated_attendance is None


@pytest.mark.parametrize(
    "error",
    [
        openai.APIConnectionError(request=mock.Mock()),
        ValueError("The model returned no parsable output."),
    ],
)
def test_backend_failures_become_external_service_errors(error: Exception) -> None:
    with mock.patch.object(MockAssistant, "generate_description", side_effect=error):
        with pytest.raises(ExternalServiceError):
            service.generate_description("Robot Fight Night")


def test_other_errors_propagate() -> None:
    with mock.patch.object(MockAssistant, "generate_description", side_effect=KeyError("boom")):
        with pytest.raises(KeyError):
            service.generate_description("Robot Fight Night")


class TestChatGPTAssistant:
    @mock.patch("assistant.llms.llm_backends.call_openai")
    def test_description_prompt(self, call_openai: mock.Mock) -> None:
        call_openai.return_value = DescriptionResponse(description="A night of robots.")

        response = ChatGPTAssistant().generate_description(
            DescriptionRequest(title="Robot Fight Night", category="Competition")
        )

        assert response.description == "A night of robots."
        kwargs = call_openai.call_args.kwargs
        assert kwargs["output_schema"] is DescriptionResponse
        assert "Title: Robot Fight Night" in kwargs["user_prompt"]
        assert "Category: Competition" in kwargs["user_prompt"]
        assert "Expected attendees" not in kwargs["user_prompt"]
        assert "<USER_INPUT>" in kwargs["user_prompt"]

    @mock.patch("assistant.llms.llm_backends.call_openai")
    def test_feedback_prompt(self, call_openai: mock.Mock) -> None:
        call_openai.return_value = ReviewFeedbackResponse(feedback="Please add a budget.")

        ChatGPTAssistant().generate_review_feedback(ReviewFeedbackRequest(event_title="Quiz", action="rejected"))

        prompt = call_openai.call_args.kwargs["user_prompt"]
        assert 'decided "rejected"' in prompt
        assert "Risk notes: none given" in prompt

    @mock.patch("assistant.llms.llm_backends.call_openai")
    def test_recommendation_prompt_lists_venues(self, call_openai: mock.Mock) -> None:
        ChatGPTAssistant().recommend(
            RecommendationRequest(
                title="Hackathon",
                venues=[VenueOption(name="Lab", capacity=30, location="Building C", amenities=["wifi", "power"])],
            )
        )

        prompt = call_openai.call_args.kwargs["user_prompt"]
        assert "- Lab (capacity 30, Building C; wifi, power)" in prompt

    @mock.patch("assistant.llms.llm_backends.call_openai")
    def test_recommendation_prompt_without_venues(self, call_openai: mock.Mock) -> None:
        ChatGPTAssistant().recommend(RecommendationRequest(title="Hackathon"))

        assert "- no venues available" in call_openai.call_args.kwargs["user_prompt"]
