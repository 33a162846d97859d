"""Tests for granting and revoking roles."""

import pytest
from django.core.exceptions import ValidationError

from accounts.models import ClubUser, RoleAssignment
from accounts.roles import AppRole, capabilities_for
from accounts.service import roles as role_service
from common.models import AuditLog
from events.exceptions import AuthorizationError
from events.models import Club

pytestmark = pytest.mark.django_db


def test_system_admin_assigns_club_role(system_admin: ClubUser, user: ClubUser, club: Club) -> None:
    assignment = role_service.assign_role(system_admin, user, AppRole.PRESIDENT, club_id=club.pk)

    assert assignment.role == AppRole.PRESIDENT
    assert capabilities_for(user).can_create(club.pk)
    assert AuditLog.objects.filter(action="role_assigned", entity_id=str(assignment.pk)).exists()


def test_non_admin_cannot_assign(organiser: ClubUser, user: ClubUser, club: Club) -> None:
    with pytest.raises(AuthorizationError):
        role_service.assign_role(organiser, user, AppRole.MEMBER, club_id=club.pk)

    assert not RoleAssignment.objects.filter(user=user).exists()


def test_club_scoped_role_requires_a_club(system_admin: ClubUser, user: ClubUser) -> None:
    with pytest.raises(ValidationError) as exc_info:
        role_service.assign_role(system_admin, user, AppRole.VICE_PRESIDENT)

    assert "club" in exc_info.value.message_dict


def test_duplicate_assignment_is_refused(system_admin: ClubUser, user: ClubUser, club: Club) -> None:
    role_service.assign_role(system_admin, user, AppRole.MEMBER, club_id=club.pk)

    with pytest.raises(ValidationError):
        role_service.assign_role(system_admin, user, AppRole.MEMBER, club_id=club.pk)

    assert RoleAssignment.objects.filter(user=user).count() == 1


def test_revoke_role(system_admin: ClubUser, organiser: ClubUser, club: Club) -> None:
    assignment = organiser.role_assignments.get()

    role_service.revoke_role(system_admin, assignment)

    assert not capabilities_for(organiser).can_create(club.pk)
    assert AuditLog.objects.filter(action="role_revoked", entity_id=str(assignment.pk)).exists()


def test_revoke_requires_admin(organiser: ClubUser) -> None:
    assignment = organiser.role_assignments.get()

    with pytest.raises(AuthorizationError):
        role_service.revoke_role(organiser, assignment)

    assert RoleAssignment.objects.filter(pk=assignment.pk).exists()
