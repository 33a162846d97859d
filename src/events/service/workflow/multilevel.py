"""Multi-level weighted approval.

Levels are worked strictly in order. An OR level needs one holder of any listed
role; an AND level needs every listed role signed off by a different reviewer.
Rejecting any level rejects the event and leaves later levels untouched.
"""

import typing as t

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import RoleSet, capabilities_for
from events.exceptions import AuthorizationError, ConflictError
from events.models import ApprovalLevel, Event, LevelSignoff
from events.service import venue_service
from notifications.enums import NotificationType
from notifications.service import notification_helpers

from .policy import APPROVAL_POLICY
from .states import Status
from .transitions import assert_status, decide_level, transition

logger = structlog.get_logger(__name__)

REVIEWABLE = (Status.SUBMITTED, Status.IN_REVIEW)


def materialize_levels(event: Event) -> list[ApprovalLevel]:
    """Create the event's levels from ``APPROVAL_POLICY``. No-op if they exist."""
    if event.approval_levels.exists():
        return list(event.approval_levels.order_by("level"))
    levels = [
        ApprovalLevel(
            event=event,
            level=policy.level,
            required_roles=list(policy.required_roles),
            approval_rule=policy.rule,
        )
        for policy in APPROVAL_POLICY
    ]
    for level in levels:
        level.full_clean()
    created = ApprovalLevel.objects.bulk_create(levels)
    logger.info("approval_levels_materialized", event_id=str(event.pk), levels=len(created))
    return created


def current_level(event: Event) -> ApprovalLevel | None:
    """The lowest level still pending, or ``None`` when nothing is left to decide."""
    if event.status not in REVIEWABLE:
        return None
    return event.approval_levels.pending().order_by("level").first()


def signed_roles(level: ApprovalLevel) -> set[str]:
    return set(level.signoffs.values_list("role", flat=True))


def open_roles_for(roles: RoleSet, user: ClubUser, level: ApprovalLevel) -> list[str]:
    """Required roles of ``level`` that ``user`` holds and nobody has signed for yet."""
    held = [r for r in level.required_roles if roles.holds(r)]
    if level.approval_rule == ApprovalLevel.Rule.OR:
        return held
    if level.signoffs.filter(user=user).exists():
        return []
    done = signed_roles(level)
    return [r for r in held if r not in done]


class MultiLevelReducer:
    """Reducer for events that carry approval levels."""

    name = "multi_level"

    def can_act(self, roles: RoleSet, user: ClubUser, event: Event, level: ApprovalLevel | None = None) -> bool:
        if event.created_by_id == user.pk:
            return False
        lowest = current_level(event)
        if lowest is None or (level is not None and level.pk != lowest.pk):
            return False
        return bool(open_roles_for(roles, user, lowest))

    def next_reviewers(self, event: Event) -> list[ClubUser]:
        level = current_level(event)
        if level is None:
            return []
        missing = [r for r in level.required_roles if r not in signed_roles(level)]
        return list(ClubUser.objects.with_role(*missing).exclude(pk=event.created_by_id))

    def on_submit(self, event: Event) -> None:
        materialize_levels(event)

    def _actionable_level(self, event: Event, actor: ClubUser, level_number: int | None) -> ApprovalLevel:
        """Lock and return the level ``actor`` wants to decide, enforcing order and roles."""
        if event.created_by_id == actor.pk:
            logger.warning("self_review_denied", event_id=str(event.pk), user_id=str(actor.pk))
            raise AuthorizationError(_("You cannot review your own event."))

        levels = list(ApprovalLevel.objects.select_for_update().filter(event=event).order_by("level"))
        lowest = next((lv for lv in levels if lv.status != ApprovalLevel.Status.APPROVED), None)
        if level_number is None:
            target = lowest
        else:
            target = next((lv for lv in levels if lv.level == level_number), None)
            if target is None:
                raise ValidationError({"level": [_("This event has no such approval level.")]})
        if target is None or target.status != ApprovalLevel.Status.PENDING:
            raise ConflictError(_("This approval level has already been decided."))
        if lowest is None or target.pk != lowest.pk:
            raise ConflictError(_("Earlier approval levels are still pending."))

        roles = capabilities_for(actor)
        if not any(roles.holds(r) for r in target.required_roles):
            raise AuthorizationError(_("You do not hold a role required at this level."))
        return target

    @transaction.atomic
    def approve(
        self,
        event: Event,
        actor: ClubUser,
        comment: str = "",
        *,
        level: int | None = None,
        role: str | None = None,
        expected_status: str | None = None,
    ) -> Event:
        """Sign off the current level as ``actor``."""
        target = self._actionable_level(event, actor, level)
        sources = [expected_status] if expected_status else list(REVIEWABLE)
        available = open_roles_for(capabilities_for(actor), actor, target)
        if role is not None:
            if role not in available:
                raise ValidationError({"role": [_("You cannot sign off this level with that role.")]})
            available = [role]
        if not available:
            raise ConflictError(_("You have already signed off this level."))

        try:
            with transaction.atomic():
                LevelSignoff.objects.create(level=target, role=available[0], user=actor, comment=comment)
        except IntegrityError as e:
            raise ConflictError(_("This role has already signed off this level.")) from e

        satisfied = target.approval_rule == ApprovalLevel.Rule.OR or set(target.required_roles) <= signed_roles(
            target
        )
        if not satisfied:
            assert_status(event, sources)
            logger.info(
                "approval_level_signed",
                event_id=str(event.pk),
                level=target.level,
                role=available[0],
                user_id=str(actor.pk),
            )
            return event

        decide_level(target, ApprovalLevel.Status.APPROVED, actor=actor, comment=comment)
        if not event.approval_levels.exclude(status=ApprovalLevel.Status.APPROVED).exists():
            venue_service.ensure_slot_free(event)
            transition(event, sources, Status.APPROVED, actor=actor, action="level_approve", stamp_decision=True)
            notification_helpers.notify_event_decision(
                event, NotificationType.EVENT_APPROVED, actor=actor, comment=comment
            )
            return event

        transition(event, sources, Status.IN_REVIEW, actor=actor, action="level_approve")
        notification_helpers.notify_event_decision(
            event, NotificationType.EVENT_LEVEL_APPROVED, actor=actor, comment=comment, level=target.level
        )
        notification_helpers.notify_event_submitted(event, self.next_reviewers(event), level=target.level + 1)
        return event

    @transaction.atomic
    def reject(
        self,
        event: Event,
        actor: ClubUser,
        comment: str = "",
        *,
        level: int | None = None,
        expected_status: str | None = None,
    ) -> Event:
        """Reject the current level and with it the event."""
        target = self._actionable_level(event, actor, level)
        sources = [expected_status] if expected_status else list(REVIEWABLE)
        decide_level(target, ApprovalLevel.Status.REJECTED, actor=actor, comment=comment)
        transition(event, sources, Status.REJECTED, actor=actor, action="level_reject", stamp_decision=True)
        notification_helpers.notify_event_decision(
            event, NotificationType.EVENT_REJECTED, actor=actor, comment=comment, level=target.level
        )
        return event

    def decide(
        self,
        event: Event,
        actor: ClubUser,
        action: str,
        comment: str = "",
        *,
        level: int | None = None,
        role: str | None = None,
        expected_status: str | None = None,
        **kwargs: t.Any,
    ) -> Event:
        """Route a generic review action to approve or reject."""
        if action == "approved":
            return self.approve(event, actor, comment, level=level, role=role, expected_status=expected_status)
        if action == "rejected":
            return self.reject(event, actor, comment, level=level, expected_status=expected_status)
        raise ValidationError({"action": [_("Multi-level reviews can only approve or reject.")]})
