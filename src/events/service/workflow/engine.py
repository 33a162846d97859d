"""Entry points of the approval workflow.

Each event is driven by exactly one reducer: events that carry approval levels
use the multi-level reducer, all others the two-stage legacy reducer. The club's
``approval_flow`` decides which one a submission enters.
"""

import typing as t

import structlog
from django.db import transaction
from django.db.models import Prefetch, QuerySet
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import capabilities_for
from events.exceptions import AuthorizationError, PreconditionError
from events.models import ApprovalLevel, Club, Event, LevelSignoff
from events.service import venue_service
from notifications.service import notification_helpers

from .legacy import STAGE_FOR_STATUS, LegacyReducer
from .multilevel import REVIEWABLE, MultiLevelReducer, current_level
from .states import SUBMITTABLE_STATUSES, Status
from .transitions import transition

logger = structlog.get_logger(__name__)

Reducer = LegacyReducer | MultiLevelReducer

LEGACY = LegacyReducer()
MULTI_LEVEL = MultiLevelReducer()


def reducer_for(event: Event) -> Reducer:
    """Pick the reducer from the records attached to ``event``."""
    if event.approval_levels.exists():
        return MULTI_LEVEL
    return LEGACY


def _reducer_for_submission(event: Event) -> Reducer:
    if event.approval_levels.exists():
        return MULTI_LEVEL
    if event.club.approval_flow == Club.ApprovalFlow.MULTI_LEVEL:
        return MULTI_LEVEL
    return LEGACY


def _require_flow(event: Event, reducer: Reducer) -> None:
    """Reject a flow-specific call on an event driven by the other reducer."""
    actual = reducer_for(event)
    if actual is not reducer:
        raise PreconditionError(_("This event is reviewed in the %(flow)s flow.") % {"flow": actual.name})


@transaction.atomic
def submit_event(event: Event, actor: ClubUser, *, expected_status: str | None = None) -> Event:
    """Send a draft, or an event sent back for changes, into review.

    The venue slot is checked under the venue lock, so two submissions racing
    for the same slot cannot both pass.
    """
    roles = capabilities_for(actor)
    if event.created_by_id != actor.pk and not roles.can_create(event.club_id):
        raise AuthorizationError(_("You cannot submit events for this club."))
    event.full_clean()

    venue_service.ensure_slot_free(event)
    sources = [expected_status] if expected_status else list(SUBMITTABLE_STATUSES)
    transition(event, sources, Status.SUBMITTED, actor=actor, action="submit")

    reducer = _reducer_for_submission(event)
    reducer.on_submit(event)
    notification_helpers.notify_event_submitted(event, reducer.next_reviewers(event))
    logger.info("event_submitted", event_id=str(event.pk), flow=reducer.name, actor_id=str(actor.pk))
    return event


def decide(
    event: Event,
    actor: ClubUser,
    action: str,
    comment: str = "",
    *,
    level: int | None = None,
    role: str | None = None,
    expected_status: str | None = None,
) -> Event:
    """Apply a review action through the event's reducer."""
    reducer = reducer_for(event)
    logger.debug("review_dispatched", event_id=str(event.pk), flow=reducer.name, action=action)
    return reducer.decide(event, actor, action, comment, level=level, role=role, expected_status=expected_status)


def approve_level(
    event: Event,
    actor: ClubUser,
    comment: str = "",
    *,
    level: int | None = None,
    role: str | None = None,
    expected_status: str | None = None,
) -> Event:
    _require_flow(event, MULTI_LEVEL)
    return MULTI_LEVEL.approve(event, actor, comment, level=level, role=role, expected_status=expected_status)


def reject_level(
    event: Event,
    actor: ClubUser,
    comment: str = "",
    *,
    level: int | None = None,
    expected_status: str | None = None,
) -> Event:
    _require_flow(event, MULTI_LEVEL)
    return MULTI_LEVEL.reject(event, actor, comment, level=level, expected_status=expected_status)


def review_event(
    event: Event, actor: ClubUser, action: str, comment: str = "", *, expected_status: str | None = None
) -> Event:
    _require_flow(event, LEGACY)
    return LEGACY.decide(event, actor, action, comment, expected_status=expected_status)


def can_act(user: ClubUser, event: Event, level: ApprovalLevel | None = None) -> bool:
    """Whether ``user`` may take a review action on ``event`` right now."""
    reducer = reducer_for(event)
    roles = capabilities_for(user)
    if isinstance(reducer, MultiLevelReducer):
        return reducer.can_act(roles, user, event, level)
    return reducer.can_act(roles, user, event)


def can_act_on_level(user: ClubUser, event: Event, level: ApprovalLevel) -> bool:
    """Whether ``user`` may approve or reject ``level`` of ``event`` right now."""
    return MULTI_LEVEL.can_act(capabilities_for(user), user, event, level)


def pending_reviews_for(user: ClubUser) -> list[Event]:
    """Events waiting for a decision ``user`` is allowed to make."""
    roles = capabilities_for(user)
    if not roles.roles:
        return []

    queue: list[Event] = []
    if roles.can_approve():
        legacy_qs = (
            Event.objects.with_relations()
            .filter(status__in=STAGE_FOR_STATUS.keys(), approval_levels__isnull=True)
            .exclude(created_by=user)
        )
        queue.extend(legacy_qs)

    leveled: QuerySet[Event] = (
        Event.objects.with_relations()
        .filter(status__in=REVIEWABLE, approval_levels__isnull=False)
        .exclude(created_by=user)
        .distinct()
        .prefetch_related(
            Prefetch("approval_levels", queryset=ApprovalLevel.objects.order_by("level")),
            Prefetch("approval_levels__signoffs", queryset=LevelSignoff.objects.all()),
        )
    )
    queue.extend(e for e in leveled if MULTI_LEVEL.can_act(roles, user, e))
    return sorted(queue, key=lambda e: (e.start, str(e.pk)))


def level_overview(event: Event, user: ClubUser) -> list[dict[str, t.Any]]:
    """Levels of ``event`` with their sign-offs and whether ``user`` can act on each."""
    lowest = current_level(event)
    roles = capabilities_for(user)
    overview = []
    for level in event.approval_levels.order_by("level").prefetch_related("signoffs"):
        overview.append(
            {
                "level": level,
                "signed_roles": sorted(s.role for s in level.signoffs.all()),
                "is_current": lowest is not None and level.pk == lowest.pk,
                "can_act": lowest is not None
                and level.pk == lowest.pk
                and MULTI_LEVEL.can_act(roles, user, event, level),
            }
        )
    return overview

