"""Tests for venue conflict detection and venue administration."""

import typing as t
from datetime import date, datetime, time, timedelta

import pytest
from django.utils import timezone

from accounts.models import ClubUser
from common.models import AuditLog
from events import schema
from events.exceptions import AuthorizationError, VenueConflictError
from events.models import BlackoutDate, Event, Venue
from events.service import venue_service
from events.service.venue_service import ConflictKind

pytestmark = pytest.mark.django_db


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime.combine(day, time(hour, minute)), timezone.get_current_timezone())


@pytest.fixture
def day(next_week: datetime) -> date:
    return timezone.localdate(next_week)


@pytest.fixture
def booked(event_factory: t.Any, day: date) -> Event:
    """[14:00, 15:00) on ``day``."""
    return event_factory(title="Afternoon Talk", start=local(day, 14), end=local(day, 15))


class TestFindConflicts:
    def test_touching_windows_do_not_conflict(self, venue: Venue, booked: Event, day: date) -> None:
        assert venue_service.find_conflicts(venue, local(day, 15), local(day, 16)) == []
        assert venue_service.find_conflicts(venue, local(day, 13), local(day, 14)) == []

    def test_overlap_is_reported(self, venue: Venue, booked: Event, day: date) -> None:
        conflicts = venue_service.find_conflicts(venue, local(day, 14, 30), local(day, 15, 30))

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.kind == ConflictKind.EVENT
        assert conflict.event_id == booked.pk
        assert conflict.title == "Afternoon Talk"
        assert conflict.start == booked.start
        assert conflict.end == booked.end

    def test_enclosing_window_conflicts(self, venue: Venue, booked: Event, day: date) -> None:
        assert len(venue_service.find_conflicts(venue, local(day, 10), local(day, 18))) == 1

    def test_excluded_event_is_ignored(self, venue: Venue, booked: Event, day: date) -> None:
        conflicts = venue_service.find_conflicts(venue, local(day, 14), local(day, 15), exclude_event_id=booked.pk)
        assert conflicts == []

    def test_rejected_events_free_their_slot(self, venue: Venue, booked: Event, day: date) -> None:
        Event.objects.filter(pk=booked.pk).update(status=Event.EventStatus.REJECTED)
        assert venue_service.find_conflicts(venue, local(day, 14), local(day, 15)) == []

    @pytest.mark.parametrize(
        "status",
        [Event.EventStatus.DRAFT, Event.EventStatus.SUBMITTED, Event.EventStatus.APPROVED],
    )
    def test_non_rejected_events_hold_their_slot(
        self, venue: Venue, booked: Event, day: date, status: Event.EventStatus
    ) -> None:
        Event.objects.filter(pk=booked.pk).update(status=status)
        assert len(venue_service.find_conflicts(venue, local(day, 14), local(day, 15))) == 1

    def test_other_venues_are_ignored(self, small_venue: Venue, booked: Event, day: date) -> None:
        assert venue_service.find_conflicts(small_venue, local(day, 14), local(day, 15)) == []

    def test_blackout_covers_the_whole_local_day(self, venue: Venue, day: date) -> None:
        blackout = BlackoutDate.objects.create(venue=venue, start_date=day, end_date=day, reason="Exams")

        early = venue_service.find_conflicts(venue, local(day, 0), local(day, 1))
        late = venue_service.find_conflicts(venue, local(day, 23), local(day + timedelta(days=1), 1))

        assert [c.blackout_id for c in early] == [blackout.pk]
        assert [c.kind for c in late] == [ConflictKind.BLACKOUT]
        assert late[0].title == "Exams"

    def test_blackout_end_is_exclusive_at_next_midnight(self, venue: Venue, day: date) -> None:
        BlackoutDate.objects.create(venue=venue, start_date=day, end_date=day, reason="Exams")

        next_day = day + timedelta(days=1)
        assert venue_service.find_conflicts(venue, local(next_day, 0), local(next_day, 2)) == []
        assert venue_service.find_conflicts(venue, local(day - timedelta(days=1), 20), local(day, 0)) == []

    def test_results_are_sorted_by_start(self, venue: Venue, event_factory: t.Any, day: date) -> None:
        late = event_factory(title="Late", start=local(day, 16), end=local(day, 17))
        early = event_factory(title="Early", start=local(day, 9), end=local(day, 10))
        blackout = BlackoutDate.objects.create(venue=venue, start_date=day, end_date=day, reason="Cleaning")

        conflicts = venue_service.find_conflicts(venue, local(day, 8), local(day, 18))

        assert [c.event_id or c.blackout_id for c in conflicts] == [blackout.pk, early.pk, late.pk]

    def test_accepts_a_venue_id(self, venue: Venue, booked: Event, day: date) -> None:
        assert len(venue_service.find_conflicts(venue.pk, local(day, 14), local(day, 15))) == 1


class TestEnsureSlotFree:
    def test_passes_when_free(self, booked: Event) -> None:
        venue_service.ensure_slot_free(booked)

    def test_raises_with_the_conflicts(self, event_factory: t.Any, booked: Event, day: date) -> None:
        clash = event_factory(title="Clash", start=local(day, 14, 30), end=local(day, 16))

        with pytest.raises(VenueConflictError) as exc_info:
            venue_service.ensure_slot_free(clash)

        assert [c.event_id for c in exc_info.value.conflicts] == [booked.pk]


class TestVenueAdministration:
    def test_create_venue(self, system_admin: ClubUser) -> None:
        payload = schema.VenueCreateSchema(name="Auditorium", capacity=500, amenities=["stage", "sound"])

        venue = venue_service.create_venue(system_admin, payload)

        assert venue.capacity == 500
        assert venue.amenities == ["stage", "sound"]
        assert AuditLog.objects.filter(action="venue_created", entity_id=str(venue.pk)).exists()

    def test_create_requires_venue_rights(self, organiser: ClubUser) -> None:
        with pytest.raises(AuthorizationError):
            venue_service.create_venue(organiser, schema.VenueCreateSchema(name="Nope", capacity=5))
        assert not Venue.objects.filter(name="Nope").exists()

    def test_deactivate_venue(self, system_admin: ClubUser, venue: Venue) -> None:
        venue_service.update_venue(system_admin, venue, schema.VenueUpdateSchema(active=False))

        venue.refresh_from_db()
        assert venue.active is False
        entry = AuditLog.objects.get(action="venue_updated", entity_id=str(venue.pk))
        assert entry.before == {"active": True}
        assert entry.after == {"active": False}

    def test_add_and_remove_blackout(self, system_admin: ClubUser, venue: Venue, day: date) -> None:
        payload = schema.BlackoutCreateSchema(start_date=day, end_date=day + timedelta(days=2), reason="Renovation")

        blackout = venue_service.add_blackout(system_admin, venue, payload)
        assert venue.blackouts.count() == 1

        venue_service.remove_blackout(system_admin, blackout)
        assert venue.blackouts.count() == 0

    def test_blackout_requires_venue_rights(self, organiser: ClubUser, venue: Venue, day: date) -> None:
        payload = schema.BlackoutCreateSchema(start_date=day, end_date=day, reason="Party")
        with pytest.raises(AuthorizationError):
            venue_service.add_blackout(organiser, venue, payload)
