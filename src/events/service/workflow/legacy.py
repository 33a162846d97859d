"""Two-stage review: club officers first, then Student Affairs."""

import typing as t

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import Capability, RoleSet, capabilities_for, roles_with
from events.exceptions import AuthorizationError, StaleStateError
from events.models import Approval, Event
from events.service import venue_service
from notifications.enums import NotificationType
from notifications.service import notification_helpers

from .states import Status
from .transitions import transition

logger = structlog.get_logger(__name__)

Decision = Approval.Decision

STAGE_FOR_STATUS: dict[str, str] = {
    Status.SUBMITTED: Approval.Stage.CLUB,
    Status.CLUB_APPROVED: Approval.Stage.SA,
}

# (source status, decision) -> (target status, notification)
TRANSITIONS: dict[tuple[str, str], tuple[str, NotificationType]] = {
    (Status.SUBMITTED, Decision.APPROVED): (Status.CLUB_APPROVED, NotificationType.EVENT_CLUB_APPROVED),
    (Status.SUBMITTED, Decision.CHANGES_REQUIRED): (Status.CHANGES_REQUIRED, NotificationType.EVENT_CHANGES_REQUIRED),
    (Status.SUBMITTED, Decision.REJECTED): (Status.REJECTED, NotificationType.EVENT_REJECTED),
    (Status.CLUB_APPROVED, Decision.APPROVED): (Status.SA_APPROVED, NotificationType.EVENT_SA_APPROVED),
    (Status.CLUB_APPROVED, Decision.CHANGES_REQUIRED): (
        Status.CHANGES_REQUIRED,
        NotificationType.EVENT_CHANGES_REQUIRED,
    ),
    (Status.CLUB_APPROVED, Decision.REJECTED): (Status.REJECTED, NotificationType.EVENT_REJECTED),
}

APPROVING_TARGETS = frozenset({Status.CLUB_APPROVED, Status.SA_APPROVED})


class LegacyReducer:
    """Reducer for events without approval levels."""

    name = "legacy"

    def can_act(self, roles: RoleSet, user: ClubUser, event: Event) -> bool:
        return roles.can_approve() and event.created_by_id != user.pk and event.status in STAGE_FOR_STATUS

    def authorize(self, roles: RoleSet, user: ClubUser, event: Event) -> None:
        if event.created_by_id == user.pk:
            logger.warning("self_review_denied", event_id=str(event.pk), user_id=str(user.pk))
            raise AuthorizationError(_("You cannot review your own event."))
        if not roles.can_approve():
            raise AuthorizationError(_("You are not allowed to review events."))

    def next_reviewers(self, event: Event) -> list[ClubUser]:
        return list(
            ClubUser.objects.with_role(*roles_with(Capability.APPROVE)).exclude(pk=event.created_by_id)
        )

    def on_submit(self, event: Event) -> None:
        """Nothing to materialize for the two-stage flow."""

    @transaction.atomic
    def decide(
        self,
        event: Event,
        actor: ClubUser,
        action: str,
        comment: str = "",
        *,
        expected_status: str | None = None,
        **kwargs: t.Any,
    ) -> Event:
        """Apply one reviewer decision and record it."""
        self.authorize(capabilities_for(actor), actor, event)
        if action not in Decision.values:
            raise ValidationError({"action": [_("Unknown review action.")]})

        source = expected_status or event.status
        if source not in STAGE_FOR_STATUS:
            raise StaleStateError(STAGE_FOR_STATUS.keys(), event.status)
        target, notification_type = TRANSITIONS[(source, action)]

        if target in APPROVING_TARGETS:
            venue_service.ensure_slot_free(event)

        transition(
            event,
            [source],
            target,
            actor=actor,
            action=f"review_{action}",
            stamp_decision=target != Status.CLUB_APPROVED,
        )
        approval = Approval.objects.create(
            event=event,
            reviewer=actor,
            stage=STAGE_FOR_STATUS[source],
            status=action,
            comment=comment,
        )
        logger.info(
            "event_reviewed",
            event_id=str(event.pk),
            approval_id=str(approval.pk),
            stage=approval.stage,
            decision=action,
            reviewer_id=str(actor.pk),
        )
        notification_helpers.notify_event_decision(event, notification_type, actor=actor, comment=comment)
        return event
