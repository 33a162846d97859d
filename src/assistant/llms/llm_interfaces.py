from typing import Literal, Protocol

from pydantic import BaseModel, Field

# ---- Pydantic Models for Data Structures ----


class DescriptionRequest(BaseModel):
    title: str
    category: str = ""
    attendees: int | None = None
    venue: str | None = None


class DescriptionResponse(BaseModel):
    description: str = Field(..., description="A short, engaging event description in plain text.")


class ReviewFeedbackRequest(BaseModel):
    event_title: str
    description: str = ""
    category: str = ""
    attendees: int | None = None
    risk_notes: str = ""
    action: Literal["approved", "changes_required", "rejected"]


class ReviewFeedbackResponse(BaseModel):
    feedback: str = Field(..., description="A courteous reviewer comment explaining the decision.")


class VenueOption(BaseModel):
    name: str
    capacity: int
    location: str = ""
    amenities: list[str] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    title: str
    category: str = ""
    description: str = ""
    venues: list[VenueOption] = Field(default_factory=list)


class Recommendations(BaseModel):
    suggested_venue: str | None = None
    estimated_attendance: str | None = None
    risk_considerations: list[str] = Field(default_factory=list)
    improvement_tips: list[str] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    recommendations: Recommendations


# ---- The Protocol ----


class EventAssistant(Protocol):
    """Defines the interface for any class that writes event text for organisers and reviewers."""

    def generate_description(self, request: DescriptionRequest) -> DescriptionResponse:
        """Draft a description from the basic facts of an event."""

    def generate_review_feedback(self, request: ReviewFeedbackRequest) -> ReviewFeedbackResponse:
        """Draft the comment a reviewer attaches to a decision."""

    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        """Suggest a venue, an attendance estimate, risks and improvements."""
