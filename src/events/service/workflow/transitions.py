"""Conditional status writes.

Every status change is a single ``UPDATE ... WHERE status IN (...)``. A write
that matches no row means another request moved the event first; the caller's
transaction is aborted with ``StaleStateError`` so nothing it wrote survives.
"""

import typing as t
from collections.abc import Iterable

import structlog
from django.utils import timezone

from common import audit, changes
from events.exceptions import StaleStateError
from events.models import ApprovalLevel, Event

logger = structlog.get_logger(__name__)


def transition(
    event: Event,
    from_statuses: Iterable[str],
    to_status: str,
    *,
    actor: t.Any,
    action: str,
    stamp_decision: bool = False,
) -> Event:
    """Move ``event`` to ``to_status`` if it is currently in one of ``from_statuses``.

    Must run inside ``transaction.atomic``. Updates ``event`` in place.
    """
    expected = tuple(from_statuses)
    now = timezone.now()
    values: dict[str, t.Any] = {"status": to_status, "updated_at": now}
    if getattr(actor, "is_authenticated", False):
        values["updated_by"] = actor
    if stamp_decision:
        values["last_decision_at"] = now

    updated = Event.objects.filter(pk=event.pk, status__in=expected).update(**values)
    if updated != 1:
        actual = Event.objects.filter(pk=event.pk).values_list("status", flat=True).first()
        logger.info(
            "event_transition_stale",
            event_id=str(event.pk),
            expected=list(expected),
            actual=actual,
            target=to_status,
        )
        raise StaleStateError(expected, actual)

    previous = event.status
    for key, value in values.items():
        setattr(event, key, value)
    audit.record(actor=actor, instance=event, action=action, before={"status": previous}, after={"status": to_status})
    changes.publish(changes.topic_for(Event), event.pk, "update")
    logger.info(
        "event_transitioned",
        event_id=str(event.pk),
        from_status=previous,
        to_status=to_status,
        actor_id=str(actor.pk) if getattr(actor, "pk", None) else None,
    )
    return event


def assert_status(event: Event, statuses: Iterable[str]) -> None:
    """Fail unless the stored status is one of ``statuses``, without changing it.

    Bumps ``updated_at`` through the same conditional write so the check and any
    row inserted next commit or fail together.
    """
    expected = tuple(statuses)
    updated = Event.objects.filter(pk=event.pk, status__in=expected).update(updated_at=timezone.now())
    if updated != 1:
        actual = Event.objects.filter(pk=event.pk).values_list("status", flat=True).first()
        raise StaleStateError(expected, actual)


def decide_level(level: ApprovalLevel, status: str, *, actor: t.Any, comment: str = "") -> ApprovalLevel:
    """Move a pending level to ``status``."""
    now = timezone.now()
    updated = ApprovalLevel.objects.filter(pk=level.pk, status=ApprovalLevel.Status.PENDING).update(
        status=status, approved_by=actor, approved_at=now, comment=comment, updated_at=now
    )
    if updated != 1:
        actual = ApprovalLevel.objects.filter(pk=level.pk).values_list("status", flat=True).first()
        raise StaleStateError([ApprovalLevel.Status.PENDING], actual)
    level.status = status
    level.approved_by = actor
    level.approved_at = now
    level.comment = comment
    audit.record(
        actor=actor,
        instance=level,
        action=f"level_{status}",
        before={"status": ApprovalLevel.Status.PENDING},
        after={"status": status, "level": level.level},
    )
    changes.publish(changes.topic_for(ApprovalLevel), level.pk, "update")
    return level
