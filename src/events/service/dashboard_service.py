"""Read side: dashboard, review queue and calendar."""

import typing as t
from datetime import datetime
from uuid import UUID

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, QuerySet

from accounts.models import ClubUser
from accounts.roles import capabilities_for
from events.models import Club, Event
from events.service import workflow

logger = structlog.get_logger(__name__)

MY_EVENTS_LIMIT = 20


def status_counts_cache_key(club_id: t.Any) -> str:
    return f"dashboard:status_counts:{club_id}"


def invalidate_status_counts(club_id: t.Any) -> None:
    cache.delete(status_counts_cache_key(club_id))


def club_status_counts(club_id: UUID) -> dict[str, int]:
    """Number of events per status for a club, cached until one of its events changes."""

    def _count() -> dict[str, int]:
        rows = Event.objects.filter(club_id=club_id).values("status").annotate(n=Count("id")).order_by()
        counts = {status: 0 for status in Event.EventStatus.values}
        counts.update({row["status"]: row["n"] for row in rows})
        return counts

    return t.cast(
        dict[str, int],
        cache.get_or_set(status_counts_cache_key(club_id), _count, timeout=settings.DASHBOARD_CACHE_TIMEOUT),
    )


def on_event_changed(topic: str, pk: str, action: str) -> None:
    """Drop the cached counts of the club owning the changed event."""
    club_id = Event.objects.filter(pk=pk).values_list("club_id", flat=True).first()
    if club_id is None:
        return
    invalidate_status_counts(club_id)
    logger.debug("dashboard_cache_invalidated", club_id=str(club_id), event_id=pk, action=action)


def dashboard_for(user: ClubUser) -> dict[str, t.Any]:
    """Everything the landing page shows for ``user``."""
    roles = capabilities_for(user)
    my_events = list(Event.objects.with_relations().filter(created_by=user).order_by("-start")[:MY_EVENTS_LIMIT])

    club_ids = set(roles.clubs()) | {e.club_id for e in my_events}
    clubs = Club.objects.filter(pk__in=club_ids).order_by("name")
    return {
        "my_events": my_events,
        "review_queue": workflow.pending_reviews_for(user),
        "status_counts": [{"club": club, "counts": club_status_counts(club.pk)} for club in clubs],
    }


def calendar(
    start: datetime,
    end: datetime,
    *,
    venue_id: UUID | None = None,
    club_id: UUID | None = None,
) -> QuerySet[Event]:
    """Approved events overlapping ``[start, end)``."""
    qs = Event.objects.approved().with_relations().overlapping(start, end)
    if venue_id is not None:
        qs = qs.filter(venue_id=venue_id)
    if club_id is not None:
        qs = qs.filter(club_id=club_id)
    return qs.order_by("start", "id")
