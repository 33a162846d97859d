from uuid import UUID

from ninja import FilterSchema
from pydantic import Field

from events.models import Event


class EventFilterSchema(FilterSchema):
    club_id: UUID | None = None
    venue_id: UUID | None = None
    category: str | None = None
    status: list[Event.EventStatus] | None = Field(None, q="status__in")  # type: ignore[call-overload]
    search: str | None = Field(  # type: ignore[call-overload]
        None, q=["title__icontains", "description__icontains", "club__name__icontains"]
    )


class VenueFilterSchema(FilterSchema):
    active: bool | None = None
    min_capacity: int | None = Field(None, q="capacity__gte")  # type: ignore[call-overload]
    search: str | None = Field(None, q=["name__icontains", "location__icontains"])  # type: ignore[call-overload]
