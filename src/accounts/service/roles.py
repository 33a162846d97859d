"""Role assignment management."""

from uuid import UUID

import structlog
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser, RoleAssignment
from accounts.roles import capabilities_for
from common import audit
from events.exceptions import AuthorizationError, ConflictError

logger = structlog.get_logger(__name__)


def _require_role_manager(actor: ClubUser) -> None:
    if not capabilities_for(actor).can_manage_roles():
        logger.warning("role_management_denied", actor_id=str(actor.id))
        raise AuthorizationError(_("Only system administrators can manage roles."))


@transaction.atomic
def assign_role(
    actor: ClubUser,
    user: ClubUser,
    role: str,
    club_id: UUID | None = None,
    user_type: str = RoleAssignment.UserType.STUDENT,
) -> RoleAssignment:
    """Grant ``role`` to ``user``, optionally within a club."""
    _require_role_manager(actor)
    assignment = RoleAssignment(user=user, role=role, club_id=club_id, user_type=user_type)
    try:
        with transaction.atomic():
            assignment.save()
    except IntegrityError as e:
        raise ConflictError(_("This role is already assigned.")) from e
    audit.record(
        actor=actor,
        instance=assignment,
        action="role_assigned",
        after={"user_id": str(user.id), "role": role, "club_id": str(club_id) if club_id else None},
    )
    logger.info("role_assigned", actor_id=str(actor.id), user_id=str(user.id), role=role, club_id=str(club_id))
    return assignment


@transaction.atomic
def revoke_role(actor: ClubUser, assignment: RoleAssignment) -> None:
    """Remove a role assignment."""
    _require_role_manager(actor)
    before = {
        "user_id": str(assignment.user_id),
        "role": assignment.role,
        "club_id": str(assignment.club_id) if assignment.club_id else None,
    }
    audit.record(actor=actor, instance=assignment, action="role_revoked", before=before)
    assignment.delete()
    logger.info("role_revoked", actor_id=str(actor.id), **before)
