import typing as t
from datetime import datetime, timedelta

import pytest
from django.core.cache import cache

from accounts.models import ClubUser
from events.models import Club, Event, Venue
from events.service import dashboard_service, workflow

pytestmark = pytest.mark.django_db


class TestStatusCounts:
    def test_counts_every_status(self, club: Club, event_factory: t.Any, next_week: datetime) -> None:
        event_factory()
        event_factory(status=Event.EventStatus.APPROVED, start=next_week + timedelta(days=1))

        counts = dashboard_service.club_status_counts(club.pk)

        assert counts["draft"] == 1
        assert counts["approved"] == 1
        assert counts["rejected"] == 0
        assert set(counts) == set(Event.EventStatus.values)

    def test_counts_are_cached(self, club: Club, event_factory: t.Any) -> None:
        dashboard_service.club_status_counts(club.pk)

        assert cache.get(dashboard_service.status_counts_cache_key(club.pk)) is not None

    def test_committed_change_drops_the_cache(
        self,
        club: Club,
        draft_event: Event,
        organiser: ClubUser,
        django_capture_on_commit_callbacks: t.Any,
    ) -> None:
        assert dashboard_service.club_status_counts(club.pk)["draft"] == 1

        with django_capture_on_commit_callbacks(execute=True):
            workflow.submit_event(draft_event, organiser)

        assert cache.get(dashboard_service.status_counts_cache_key(club.pk)) is None
        counts = dashboard_service.club_status_counts(club.pk)
        assert counts["draft"] == 0
        assert counts["submitted"] == 1

    def test_on_event_changed_ignores_unknown_rows(self, club: Club) -> None:
        dashboard_service.club_status_counts(club.pk)

        dashboard_service.on_event_changed("events_event", "00000000-0000-0000-0000-000000000000", "delete")

        assert cache.get(dashboard_service.status_counts_cache_key(club.pk)) is not None


class TestDashboard:
    def test_organiser_view(self, club: Club, draft_event: Event, organiser: ClubUser) -> None:
        data = dashboard_service.dashboard_for(organiser)

        assert data["my_events"] == [draft_event]
        assert data["review_queue"] == []
        assert [row["club"] for row in data["status_counts"]] == [club]

    def test_reviewer_sees_queue(self, draft_event: Event, organiser: ClubUser, department_director: ClubUser) -> None:
        workflow.submit_event(draft_event, organiser)

        data = dashboard_service.dashboard_for(department_director)

        assert [e.pk for e in data["review_queue"]] == [draft_event.pk]
        assert data["my_events"] == []

    def test_user_without_roles(self, user: ClubUser) -> None:
        assert dashboard_service.dashboard_for(user) == {"my_events": [], "review_queue": [], "status_counts": []}


class TestCalendar:
    @pytest.fixture
    def approved(self, event_factory: t.Any, next_week: datetime) -> Event:
        return event_factory(status=Event.EventStatus.APPROVED, start=next_week)

    def test_only_approved_events(self, approved: Event, event_factory: t.Any, next_week: datetime) -> None:
        event_factory(start=next_week + timedelta(hours=3))

        result = list(dashboard_service.calendar(next_week - timedelta(days=1), next_week + timedelta(days=1)))

        assert result == [approved]

    def test_window_is_half_open(self, approved: Event) -> None:
        assert not dashboard_service.calendar(approved.end, approved.end + timedelta(hours=1)).exists()
        assert not dashboard_service.calendar(approved.start - timedelta(hours=1), approved.start).exists()
        assert dashboard_service.calendar(approved.end - timedelta(minutes=1), approved.end).exists()

    def test_filters(self, approved: Event, small_venue: Venue, legacy_club: Club) -> None:
        start = approved.start - timedelta(hours=1)
        end = approved.end + timedelta(hours=1)

        assert list(dashboard_service.calendar(start, end, venue_id=approved.venue_id)) == [approved]
        assert not dashboard_service.calendar(start, end, venue_id=small_venue.pk).exists()
        assert not dashboard_service.calendar(start, end, club_id=legacy_club.pk).exists()
