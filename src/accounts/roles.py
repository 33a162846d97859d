"""Role directory.

Every capability decision goes through ``ROLE_CAPABILITIES``. Nothing else in
the code base compares role names when deciding what a user may do; the only
other place roles are listed is ``DISPLAY_PRIORITY``, which picks a label and
never grants anything.
"""

import typing as t
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from django.db import models
from django.utils.translation import gettext_lazy as _


class AppRole(models.TextChoices):
    SYSTEM_ADMIN = "system_admin", _("System Administrator")
    PRESIDENT = "president", _("President")
    VICE_PRESIDENT = "vice_president", _("Vice President")
    GENERAL_DIRECTOR = "general_director", _("General Director")
    ACADEMIC_ADVISOR = "academic_advisor", _("Academic Advisor")
    DEPARTMENT_DIRECTOR = "department_director", _("Department Director")
    PROJECT_MANAGER = "project_manager", _("Project Manager")
    ASSISTANT_PROJECT_MANAGER = "assistant_project_manager", _("Assistant Project Manager")
    MEMBER = "member", _("Member")


class Capability(StrEnum):
    CREATE_EVENTS = "create_events"
    APPROVE = "approve"
    MANAGE_VENUES = "manage_venues"
    MANAGE_ROLES = "manage_roles"
    EXPORT_PROJECT_ATTENDANCE = "export_project_attendance"
    EXPORT_ORGANIZATION_ATTENDANCE = "export_organization_attendance"


class ExportScope(StrEnum):
    PROJECT = "project"
    ORGANIZATION = "organization"


_C = Capability

ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    AppRole.SYSTEM_ADMIN: frozenset({_C.CREATE_EVENTS, _C.APPROVE, _C.MANAGE_VENUES, _C.MANAGE_ROLES}),
    AppRole.PRESIDENT: frozenset(
        {
            _C.CREATE_EVENTS,
            _C.APPROVE,
            _C.MANAGE_VENUES,
            _C.EXPORT_PROJECT_ATTENDANCE,
            _C.EXPORT_ORGANIZATION_ATTENDANCE,
        }
    ),
    AppRole.VICE_PRESIDENT: frozenset(
        {
            _C.CREATE_EVENTS,
            _C.APPROVE,
            _C.MANAGE_VENUES,
            _C.EXPORT_PROJECT_ATTENDANCE,
            _C.EXPORT_ORGANIZATION_ATTENDANCE,
        }
    ),
    AppRole.GENERAL_DIRECTOR: frozenset({_C.CREATE_EVENTS, _C.APPROVE, _C.EXPORT_PROJECT_ATTENDANCE}),
    AppRole.ACADEMIC_ADVISOR: frozenset({_C.CREATE_EVENTS, _C.APPROVE}),
    AppRole.DEPARTMENT_DIRECTOR: frozenset({_C.CREATE_EVENTS, _C.APPROVE}),
    AppRole.PROJECT_MANAGER: frozenset({_C.CREATE_EVENTS, _C.EXPORT_PROJECT_ATTENDANCE}),
    AppRole.ASSISTANT_PROJECT_MANAGER: frozenset({_C.CREATE_EVENTS, _C.EXPORT_PROJECT_ATTENDANCE}),
    AppRole.MEMBER: frozenset(),
}

EXPORT_SCOPE_CAPABILITY = {
    ExportScope.PROJECT: Capability.EXPORT_PROJECT_ATTENDANCE,
    ExportScope.ORGANIZATION: Capability.EXPORT_ORGANIZATION_ATTENDANCE,
}

# Labels only. Highest first.
DISPLAY_PRIORITY: tuple[str, ...] = (
    AppRole.SYSTEM_ADMIN,
    AppRole.PRESIDENT,
    AppRole.VICE_PRESIDENT,
    AppRole.GENERAL_DIRECTOR,
    AppRole.ACADEMIC_ADVISOR,
    AppRole.DEPARTMENT_DIRECTOR,
    AppRole.PROJECT_MANAGER,
    AppRole.ASSISTANT_PROJECT_MANAGER,
    AppRole.MEMBER,
)

CLUB_SCOPED_ROLES = frozenset(
    {AppRole.PRESIDENT, AppRole.VICE_PRESIDENT, AppRole.ACADEMIC_ADVISOR, AppRole.MEMBER}
)


@dataclass(frozen=True)
class Grant:
    role: str
    club_id: UUID | None = None


@dataclass(frozen=True)
class RoleSet:
    """The capability view over one identity's role assignments."""

    grants: frozenset[Grant] = field(default_factory=frozenset)

    @property
    def roles(self) -> frozenset[str]:
        """Distinct role names, regardless of club."""
        return frozenset(g.role for g in self.grants)

    def _capabilities(self, grants: t.Iterable[Grant]) -> frozenset[Capability]:
        caps: set[Capability] = set()
        for grant in grants:
            caps |= ROLE_CAPABILITIES.get(grant.role, frozenset())
        return frozenset(caps)

    @property
    def capabilities(self) -> frozenset[Capability]:
        """Union of the capabilities of every held role."""
        return self._capabilities(self.grants)

    def has(self, capability: Capability) -> bool:
        """Whether any held role carries ``capability``."""
        return capability in self.capabilities

    def holds(self, role: str) -> bool:
        """Whether the identity holds ``role`` in any scope."""
        return role in self.roles

    def can_create(self, club_id: UUID | None) -> bool:
        """At least one non-member role scoped to ``club_id``."""
        if club_id is None:
            return False
        scoped = [g for g in self.grants if g.club_id == club_id]
        return Capability.CREATE_EVENTS in self._capabilities(scoped)

    def can_approve(self) -> bool:
        return self.has(Capability.APPROVE)

    def can_manage_venues(self) -> bool:
        return self.has(Capability.MANAGE_VENUES)

    def can_manage_roles(self) -> bool:
        return self.has(Capability.MANAGE_ROLES)

    def can_export_attendance(self, scope: ExportScope | str) -> bool:
        capability = EXPORT_SCOPE_CAPABILITY.get(ExportScope(scope))
        return capability is not None and self.has(capability)

    def primary_role(self) -> str | None:
        """Highest-priority held role, for display."""
        for role in DISPLAY_PRIORITY:
            if role in self.roles:
                return role
        return None

    def primary_role_label(self) -> str:
        role = self.primary_role()
        return str(AppRole(role).label) if role else str(_("Member"))

    def clubs(self) -> frozenset[UUID]:
        return frozenset(g.club_id for g in self.grants if g.club_id is not None)


EMPTY_ROLE_SET = RoleSet()


def capabilities_for(user: t.Any) -> RoleSet:
    """Load ``user``'s role assignments and reduce them to a ``RoleSet``.

    Anonymous or unsaved users get the empty set.
    """
    if user is None or not getattr(user, "is_authenticated", False) or user.pk is None:
        return EMPTY_ROLE_SET
    rows = user.role_assignments.values_list("role", "club_id")
    return RoleSet(grants=frozenset(Grant(role=role, club_id=club_id) for role, club_id in rows))


def role_set_from(pairs: t.Iterable[tuple[str, UUID | None]]) -> RoleSet:
    """Build a ``RoleSet`` from ``(role, club_id)`` pairs."""
    return RoleSet(grants=frozenset(Grant(role=role, club_id=club_id) for role, club_id in pairs))


def roles_with(capability: Capability) -> tuple[str, ...]:
    """Every role that carries ``capability``, in display order."""
    return tuple(role for role in DISPLAY_PRIORITY if capability in ROLE_CAPABILITIES.get(role, frozenset()))
