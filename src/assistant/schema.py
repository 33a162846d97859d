import typing as t

from ninja import Schema
from pydantic import Field

from common.schema import OneToTwoHundredString, StrippedString


class DescriptionRequestSchema(Schema):
    title: OneToTwoHundredString
    category: StrippedString = ""
    attendees: int | None = Field(None, ge=1)
    venue: StrippedString | None = None


class DescriptionResponseSchema(Schema):
    description: str


class ReviewFeedbackRequestSchema(Schema):
    event_title: OneToTwoHundredString
    action: t.Literal["approved", "changes_required", "rejected"]
    description: StrippedString = ""
    category: StrippedString = ""
    attendees: int | None = Field(None, ge=1)
    risk_notes: StrippedString = ""


class ReviewFeedbackResponseSchema(Schema):
    feedback: str


class VenueOptionSchema(Schema):
    name: StrippedString
    capacity: int = Field(..., ge=1)
    location: StrippedString = ""
    amenities: list[StrippedString] = Field(default_factory=list)


class RecommendationRequestSchema(Schema):
    title: OneToTwoHundredString
    category: StrippedString = ""
    description: StrippedString = ""
    venues: list[VenueOptionSchema] | None = Field(
        None, description="Venues to choose from. Defaults to every active venue."
    )


class RecommendationsSchema(Schema):
    suggested_venue: str | None = None
    estimated_attendance: str | None = None
    risk_considerations: list[str]
    improvement_tips: list[str]
