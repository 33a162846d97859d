"""Tests for the role directory: capability reduction and display priority."""

import typing as t
import uuid

import pytest

from accounts.models import ClubUser
from accounts.roles import (
    DISPLAY_PRIORITY,
    EMPTY_ROLE_SET,
    ROLE_CAPABILITIES,
    AppRole,
    Capability,
    ExportScope,
    capabilities_for,
    role_set_from,
    roles_with,
)

CLUB_A = uuid.uuid4()
CLUB_B = uuid.uuid4()

APPROVERS = {
    AppRole.SYSTEM_ADMIN,
    AppRole.PRESIDENT,
    AppRole.VICE_PRESIDENT,
    AppRole.GENERAL_DIRECTOR,
    AppRole.ACADEMIC_ADVISOR,
    AppRole.DEPARTMENT_DIRECTOR,
}


class TestCanCreate:
    def test_member_alone_cannot_create(self) -> None:
        roles = role_set_from([(AppRole.MEMBER, CLUB_A)])
        assert roles.can_create(CLUB_A) is False

    def test_non_member_role_scoped_to_club_can_create(self) -> None:
        roles = role_set_from([(AppRole.PROJECT_MANAGER, CLUB_A)])
        assert roles.can_create(CLUB_A) is True

    def test_creation_right_does_not_leak_to_other_clubs(self) -> None:
        roles = role_set_from([(AppRole.PROJECT_MANAGER, CLUB_A), (AppRole.MEMBER, CLUB_B)])
        assert roles.can_create(CLUB_A) is True
        assert roles.can_create(CLUB_B) is False

    def test_global_role_does_not_grant_club_creation(self) -> None:
        roles = role_set_from([(AppRole.SYSTEM_ADMIN, None)])
        assert roles.can_create(CLUB_A) is False

    def test_no_club_means_no_creation(self) -> None:
        roles = role_set_from([(AppRole.PRESIDENT, CLUB_A)])
        assert roles.can_create(None) is False


class TestCapabilities:
    @pytest.mark.parametrize("role", list(AppRole), ids=[r.value for r in AppRole])
    def test_can_approve_matches_the_approver_roles(self, role: AppRole) -> None:
        assert role_set_from([(role, CLUB_A)]).can_approve() is (role in APPROVERS)

    @pytest.mark.parametrize("role", list(AppRole), ids=[r.value for r in AppRole])
    def test_can_manage_venues(self, role: AppRole) -> None:
        expected = role in {AppRole.SYSTEM_ADMIN, AppRole.PRESIDENT, AppRole.VICE_PRESIDENT}
        assert role_set_from([(role, CLUB_A)]).can_manage_venues() is expected

    def test_project_export_roles(self) -> None:
        expected = {
            AppRole.PROJECT_MANAGER,
            AppRole.ASSISTANT_PROJECT_MANAGER,
            AppRole.GENERAL_DIRECTOR,
            AppRole.VICE_PRESIDENT,
            AppRole.PRESIDENT,
        }
        allowed = {r for r in AppRole if role_set_from([(r, CLUB_A)]).can_export_attendance(ExportScope.PROJECT)}
        assert allowed == expected

    def test_organization_export_roles(self) -> None:
        allowed = {r for r in AppRole if role_set_from([(r, CLUB_A)]).can_export_attendance("organization")}
        assert allowed == {AppRole.VICE_PRESIDENT, AppRole.PRESIDENT}

    def test_unknown_export_scope_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            role_set_from([(AppRole.PRESIDENT, CLUB_A)]).can_export_attendance("galaxy")

    def test_capabilities_are_the_union_of_held_roles(self) -> None:
        roles = role_set_from([(AppRole.PROJECT_MANAGER, CLUB_A), (AppRole.ACADEMIC_ADVISOR, CLUB_B)])
        assert roles.capabilities == (
            ROLE_CAPABILITIES[AppRole.PROJECT_MANAGER] | ROLE_CAPABILITIES[AppRole.ACADEMIC_ADVISOR]
        )

    def test_every_role_has_a_table_entry(self) -> None:
        assert set(ROLE_CAPABILITIES) == set(AppRole)

    def test_roles_with_lists_holders_in_display_order(self) -> None:
        assert roles_with(Capability.MANAGE_ROLES) == (AppRole.SYSTEM_ADMIN,)
        assert set(roles_with(Capability.APPROVE)) == APPROVERS


class TestPrimaryRole:
    def test_highest_priority_wins(self) -> None:
        roles = role_set_from(
            [(AppRole.MEMBER, CLUB_A), (AppRole.GENERAL_DIRECTOR, None), (AppRole.PROJECT_MANAGER, CLUB_B)]
        )
        assert roles.primary_role() == AppRole.GENERAL_DIRECTOR
        assert roles.primary_role_label() == "General Director"

    def test_priority_order(self) -> None:
        assert DISPLAY_PRIORITY[0] == AppRole.SYSTEM_ADMIN
        assert DISPLAY_PRIORITY[-1] == AppRole.MEMBER
        assert len(DISPLAY_PRIORITY) == len(AppRole)

    def test_empty_set_has_no_primary_role(self) -> None:
        assert EMPTY_ROLE_SET.primary_role() is None
        assert EMPTY_ROLE_SET.primary_role_label() == "Member"


@pytest.mark.django_db
class TestCapabilitiesFor:
    def test_user_without_assignments_gets_empty_set(self, user: ClubUser) -> None:
        roles = capabilities_for(user)
        assert roles.grants == frozenset()
        assert roles.can_approve() is False
        assert roles.clubs() == frozenset()

    def test_anonymous_gets_empty_set(self) -> None:
        from django.contrib.auth.models import AnonymousUser

        assert capabilities_for(AnonymousUser()) is EMPTY_ROLE_SET
        assert capabilities_for(None) is EMPTY_ROLE_SET

    def test_loads_assignments(self, organiser: ClubUser, club: t.Any) -> None:
        roles = capabilities_for(organiser)
        assert roles.holds(AppRole.PROJECT_MANAGER)
        assert roles.can_create(club.pk)
        assert roles.clubs() == frozenset({club.pk})
