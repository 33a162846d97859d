import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import ClubUser
from accounts.roles import RoleSet, capabilities_for


class UserAwareController(ControllerBase):
    def maybe_user(self) -> ClubUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(ClubUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> ClubUser:
        """Get the user for this request."""
        return t.cast(ClubUser, self.context.request.user)  # type: ignore[union-attr]

    def roles(self) -> RoleSet:
        """Capabilities of the requesting user, loaded once per request."""
        request = self.context.request  # type: ignore[union-attr]
        cached = getattr(request, "_clubhub_roles", None)
        if cached is None:
            cached = capabilities_for(self.user())
            setattr(request, "_clubhub_roles", cached)
        return t.cast(RoleSet, cached)
