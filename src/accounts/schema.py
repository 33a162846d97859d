"""Schema for accounts module."""

from uuid import UUID

from ninja import ModelSchema, Schema

from accounts.models import RoleAssignment
from accounts.roles import AppRole, Capability


class RoleAssignmentSchema(ModelSchema):
    user_id: UUID
    club_id: UUID | None = None

    class Meta:
        model = RoleAssignment
        fields = ["id", "role", "user_type", "created_at"]


class RoleAssignmentCreateSchema(Schema):
    user_id: UUID
    role: AppRole
    club_id: UUID | None = None
    user_type: RoleAssignment.UserType = RoleAssignment.UserType.STUDENT


class MyRolesSchema(Schema):
    assignments: list[RoleAssignmentSchema]
    capabilities: list[Capability]
    primary_role: AppRole | None = None
    primary_role_label: str
    can_approve: bool
    can_manage_venues: bool
    creatable_club_ids: list[UUID]
