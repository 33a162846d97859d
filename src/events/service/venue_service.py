"""Venue scheduling: conflict detection and venue administration."""

import typing as t
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import capabilities_for
from common import audit
from events import models, schema
from events.exceptions import AuthorizationError, VenueConflictError

logger = structlog.get_logger(__name__)


class ConflictKind(StrEnum):
    EVENT = "event"
    BLACKOUT = "blackout"


@dataclass(frozen=True)
class VenueConflict:
    """A booking that overlaps a requested window."""

    kind: ConflictKind
    start: datetime
    end: datetime
    title: str
    event_id: UUID | None = None
    blackout_id: UUID | None = None

    @property
    def sort_key(self) -> tuple[datetime, str, str]:
        return self.start, self.kind.value, str(self.event_id or self.blackout_id)


def blackout_window(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Local-time ``[start_date 00:00, end_date + 1 day 00:00)``."""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(start_date, time.min), tz)
    end = timezone.make_aware(datetime.combine(end_date + timedelta(days=1), time.min), tz)
    return start, end


def _overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def find_conflicts(
    venue: models.Venue | UUID,
    start: datetime,
    end: datetime,
    exclude_event_id: UUID | None = None,
) -> list[VenueConflict]:
    """Bookings at ``venue`` that overlap ``[start, end)``.

    Windows that only touch at an endpoint do not conflict. Rejected events do
    not hold their slot. The result is ordered by start time, then kind, then id.
    """
    venue_id = venue.pk if isinstance(venue, models.Venue) else venue
    events = models.Event.objects.blocking().filter(venue_id=venue_id).overlapping(start, end)
    if exclude_event_id is not None:
        events = events.exclude(pk=exclude_event_id)

    conflicts = [
        VenueConflict(kind=ConflictKind.EVENT, start=e.start, end=e.end, title=e.title, event_id=e.pk)
        for e in events.only("id", "title", "start", "end")
    ]

    # Coarse date filter with a day of slack either side; exact test below.
    first_day = timezone.localdate(start) - timedelta(days=1)
    last_day = timezone.localdate(end) + timedelta(days=1)
    blackouts = models.BlackoutDate.objects.filter(
        venue_id=venue_id, start_date__lte=last_day, end_date__gte=first_day
    )
    for blackout in blackouts:
        b_start, b_end = blackout_window(blackout.start_date, blackout.end_date)
        if _overlaps(b_start, b_end, start, end):
            conflicts.append(
                VenueConflict(
                    kind=ConflictKind.BLACKOUT,
                    start=b_start,
                    end=b_end,
                    title=blackout.reason,
                    blackout_id=blackout.pk,
                )
            )

    return sorted(conflicts, key=lambda c: c.sort_key)


def lock_venue(venue_id: UUID) -> models.Venue:
    """Take the row lock that serialises bookings of one venue.

    Must be called inside ``transaction.atomic``.
    """
    return models.Venue.objects.select_for_update().get(pk=venue_id)


def ensure_slot_free(event: models.Event) -> None:
    """Lock the event's venue and fail if its window is taken.

    Call inside the same atomic block as the status write it guards.
    """
    lock_venue(event.venue_id)
    conflicts = find_conflicts(event.venue_id, event.start, event.end, exclude_event_id=event.pk)
    if conflicts:
        logger.info(
            "venue_conflict_detected",
            event_id=str(event.pk),
            venue_id=str(event.venue_id),
            conflicts=[str(c.event_id or c.blackout_id) for c in conflicts],
        )
        raise VenueConflictError(conflicts)


def _require_venue_manager(actor: ClubUser) -> None:
    if not capabilities_for(actor).can_manage_venues():
        raise AuthorizationError(_("You are not allowed to manage venues."))


def create_venue(actor: ClubUser, payload: schema.VenueCreateSchema) -> models.Venue:
    """Create a new venue."""
    _require_venue_manager(actor)
    with transaction.atomic():
        venue = models.Venue.objects.create(**payload.model_dump())
        audit.record(actor=actor, instance=venue, action="venue_created", after=payload.model_dump(mode="json"))
    logger.info("venue_created", venue_id=str(venue.pk), actor_id=str(actor.pk))
    return venue


@transaction.atomic
def update_venue(actor: ClubUser, venue: models.Venue, payload: schema.VenueUpdateSchema) -> models.Venue:
    """Update a venue. Deactivating keeps existing events but blocks new bookings."""
    _require_venue_manager(actor)
    data = payload.model_dump(exclude_unset=True)
    venue = lock_venue(venue.pk)
    before = {key: _jsonable(getattr(venue, key)) for key in data}
    for key, value in data.items():
        setattr(venue, key, value)
    venue.save()
    audit.record(
        actor=actor,
        instance=venue,
        action="venue_updated",
        before=before,
        after={key: _jsonable(value) for key, value in data.items()},
    )
    return venue


@transaction.atomic
def add_blackout(actor: ClubUser, venue: models.Venue, payload: schema.BlackoutCreateSchema) -> models.BlackoutDate:
    """Close a venue for a range of days."""
    _require_venue_manager(actor)
    blackout = models.BlackoutDate.objects.create(venue=venue, **payload.model_dump())
    audit.record(actor=actor, instance=blackout, action="blackout_added", after=payload.model_dump(mode="json"))
    logger.info("blackout_added", venue_id=str(venue.pk), blackout_id=str(blackout.pk))
    return blackout


@transaction.atomic
def remove_blackout(actor: ClubUser, blackout: models.BlackoutDate) -> None:
    """Reopen the days covered by a blackout."""
    _require_venue_manager(actor)
    audit.record(
        actor=actor,
        instance=blackout,
        action="blackout_removed",
        before={"start_date": str(blackout.start_date), "end_date": str(blackout.end_date), "reason": blackout.reason},
    )
    blackout.delete()


def _jsonable(value: t.Any) -> t.Any:
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value
