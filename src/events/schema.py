import typing as t
from datetime import date, datetime, time
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, Field, model_validator

from accounts.roles import AppRole
from common.schema import MemberSchema, OneToOneFiftyString, OneToTwoHundredString, StrippedString
from events.models import (
    Approval,
    ApprovalLevel,
    Attendance,
    BlackoutDate,
    CheckInToken,
    Club,
    Event,
    EventComment,
    EventTemplate,
    Venue,
)

ReviewAction = t.Literal["approved", "changes_required", "rejected"]

# Clubs


class ClubSchema(ModelSchema):
    class Meta:
        model = Club
        fields = ["id", "name", "description", "logo_url", "active", "approval_flow"]


class MinimalClubSchema(Schema):
    id: UUID
    name: str


# Venues


class VenueSchema(ModelSchema):
    amenities: list[str]

    class Meta:
        model = Venue
        fields = ["id", "name", "location", "capacity", "active", "open_from", "open_to"]


class MinimalVenueSchema(Schema):
    id: UUID
    name: str
    capacity: int


class VenueCreateSchema(Schema):
    name: OneToOneFiftyString
    location: StrippedString = ""
    capacity: int = Field(..., ge=1)
    active: bool = True
    open_from: time | None = None
    open_to: time | None = None
    amenities: list[StrippedString] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_hours(self) -> "VenueCreateSchema":
        """Opening hours come as a pair."""
        if (self.open_from is None) != (self.open_to is None):
            raise ValueError("open_from and open_to must be set together")
        return self


class VenueUpdateSchema(Schema):
    name: OneToOneFiftyString | None = None
    location: StrippedString | None = None
    capacity: int | None = Field(None, ge=1)
    active: bool | None = None
    open_from: time | None = None
    open_to: time | None = None
    amenities: list[StrippedString] | None = None


class BlackoutSchema(ModelSchema):
    venue_id: UUID

    class Meta:
        model = BlackoutDate
        fields = ["id", "start_date", "end_date", "reason"]


class BlackoutCreateSchema(Schema):
    start_date: date
    end_date: date
    reason: OneToTwoHundredString

    @model_validator(mode="after")
    def validate_range(self) -> "BlackoutCreateSchema":
        """The range is inclusive, so a single day has start_date == end_date."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class VenueConflictSchema(Schema):
    kind: str
    start: datetime
    end: datetime
    title: str
    event_id: UUID | None = None
    blackout_id: UUID | None = None


class ConflictQuerySchema(Schema):
    start: AwareDatetime
    end: AwareDatetime
    exclude_event_id: UUID | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "ConflictQuerySchema":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


# Events


class PolicyAckSchema(Schema):
    safety: bool = False
    compliance: bool = False


class EventEditSchema(Schema):
    venue_id: UUID | None = None
    title: OneToTwoHundredString | None = None
    description: StrippedString | None = None
    category: StrippedString | None = None
    start: AwareDatetime | None = None
    end: AwareDatetime | None = None
    expected_attendees: int | None = Field(None, ge=1)
    risk_notes: StrippedString | None = None
    policy_ack: PolicyAckSchema | None = None


class EventCreateSchema(EventEditSchema):
    club_id: UUID
    venue_id: UUID
    title: OneToTwoHundredString
    description: StrippedString
    category: StrippedString = ""
    start: AwareDatetime
    end: AwareDatetime
    expected_attendees: int = Field(..., ge=1)
    risk_notes: StrippedString = ""
    policy_ack: PolicyAckSchema = Field(default_factory=PolicyAckSchema)
    submit: bool = Field(False, description="Submit for review right away")


class EventInListSchema(Schema):
    id: UUID
    title: str
    category: str
    status: Event.EventStatus
    start: datetime
    end: datetime
    expected_attendees: int
    club: MinimalClubSchema
    venue: MinimalVenueSchema
    created_by_id: UUID


class EventDetailSchema(EventInListSchema):
    description: str
    risk_notes: str
    policy_ack: dict[str, bool]
    created_by: MemberSchema
    updated_by_id: UUID | None = None
    last_decision_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ReviewSchema(Schema):
    action: ReviewAction
    comment: StrippedString = ""
    level: int | None = Field(None, ge=1)
    role: AppRole | None = None
    expected_status: Event.EventStatus | None = Field(
        None, description="Fail with 409 unless the event is still in this status"
    )


class ApprovalSchema(ModelSchema):
    reviewer: MemberSchema

    class Meta:
        model = Approval
        fields = ["id", "stage", "status", "comment", "created_at"]


class ApprovalLevelSchema(ModelSchema):
    approved_by: MemberSchema | None = None

    class Meta:
        model = ApprovalLevel
        fields = ["id", "level", "required_roles", "approval_rule", "status", "approved_at", "comment"]


class LevelOverviewSchema(Schema):
    level: ApprovalLevelSchema
    signed_roles: list[str]
    is_current: bool
    can_act: bool


class ReviewHistorySchema(Schema):
    flow: t.Literal["legacy", "multi_level"]
    can_act: bool
    approvals: list[ApprovalSchema]
    levels: list[LevelOverviewSchema]


# Comments and templates


class CommentSchema(ModelSchema):
    author: MemberSchema

    class Meta:
        model = EventComment
        fields = ["id", "body", "created_at"]


class CommentCreateSchema(Schema):
    body: t.Annotated[StrippedString, Field(min_length=1, max_length=4000)]


class EventTemplateSchema(ModelSchema):
    club_id: UUID

    class Meta:
        model = EventTemplate
        fields = ["id", "name", "title", "description", "category", "expected_attendees", "risk_notes", "created_at"]


class EventTemplateCreateSchema(Schema):
    name: OneToOneFiftyString
    title: StrippedString = ""
    description: StrippedString = ""
    category: StrippedString = ""
    expected_attendees: int | None = Field(None, ge=1)
    risk_notes: StrippedString = ""


# Check-in


class CheckInTokenSchema(ModelSchema):
    event_id: UUID

    class Meta:
        model = CheckInToken
        fields = ["id", "token", "expires_at", "created_at"]


class CheckInRequestSchema(Schema):
    token: StrippedString
    guest_label: OneToOneFiftyString | None = Field(
        None, description="Name to record for an unauthenticated guest check-in"
    )


class AttendanceSchema(ModelSchema):
    event_id: UUID
    user: MemberSchema | None = None
    is_guest: bool

    class Meta:
        model = Attendance
        fields = ["id", "guest_label", "checked_in_at"]


class CheckInResponseSchema(Schema):
    attendance: AttendanceSchema
    created: bool


class AttendanceSummarySchema(Schema):
    event_id: UUID
    members: int
    guests: int
    total: int
    expected_attendees: int


# Dashboard and calendar


class StatusCountSchema(Schema):
    club: MinimalClubSchema
    counts: dict[str, int]


class DashboardSchema(Schema):
    my_events: list[EventInListSchema]
    review_queue: list[EventInListSchema]
    status_counts: list[StatusCountSchema]


class CalendarQuerySchema(Schema):
    start: AwareDatetime
    end: AwareDatetime
    venue_id: UUID | None = None
    club_id: UUID | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "CalendarQuerySchema":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self
