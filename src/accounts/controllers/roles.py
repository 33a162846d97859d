import typing as t
from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from accounts import schema
from accounts.models import ClubUser, RoleAssignment
from accounts.roles import AppRole
from accounts.service import roles as role_service
from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from events.exceptions import AuthorizationError


@api_controller("/roles", auth=JWTAuth(), tags=["Roles"], throttle=UserDefaultThrottle())
class RoleController(UserAwareController):
    @route.get("/me", url_name="my_roles", response=schema.MyRolesSchema)
    def my_roles(self) -> dict[str, t.Any]:
        """The requesting user's role assignments and what they allow."""
        roles = self.roles()
        return {
            "assignments": list(self.user().role_assignments.all()),
            "capabilities": sorted(roles.capabilities),
            "primary_role": roles.primary_role(),
            "primary_role_label": roles.primary_role_label(),
            "can_approve": roles.can_approve(),
            "can_manage_venues": roles.can_manage_venues(),
            "creatable_club_ids": sorted(c for c in roles.clubs() if roles.can_create(c)),
        }

    @route.get(
        "/assignments", url_name="list_role_assignments", response=PaginatedResponseSchema[schema.RoleAssignmentSchema]
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_assignments(
        self, club_id: UUID | None = None, role: AppRole | None = None
    ) -> QuerySet[RoleAssignment]:
        """List role assignments. System administrators only."""
        if not self.roles().can_manage_roles():
            raise AuthorizationError(_("Only system administrators can list role assignments."))
        qs = RoleAssignment.objects.select_related("user").order_by("created_at")
        if club_id:
            qs = qs.filter(club_id=club_id)
        if role:
            qs = qs.filter(role=role)
        return qs

    @route.post(
        "/assignments",
        url_name="assign_role",
        response={201: schema.RoleAssignmentSchema},
        throttle=WriteThrottle(),
    )
    def assign(self, payload: schema.RoleAssignmentCreateSchema) -> tuple[int, RoleAssignment]:
        """Grant a role to a user."""
        user = get_object_or_404(ClubUser, pk=payload.user_id)
        assignment = role_service.assign_role(
            self.user(), user, payload.role, club_id=payload.club_id, user_type=payload.user_type
        )
        return 201, assignment

    @route.delete(
        "/assignments/{assignment_id}",
        url_name="revoke_role",
        response={204: None},
        throttle=WriteThrottle(),
    )
    def revoke(self, assignment_id: UUID) -> tuple[int, None]:
        """Revoke a role assignment."""
        assignment = get_object_or_404(RoleAssignment, pk=assignment_id)
        role_service.revoke_role(self.user(), assignment)
        return 204, None
