import typing as t

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle
from events import schema
from events.service import dashboard_service


@api_controller("/dashboard", auth=JWTAuth(), tags=["Dashboard"], throttle=UserDefaultThrottle())
class DashboardController(UserAwareController):
    @route.get("/", url_name="dashboard", response=schema.DashboardSchema)
    def dashboard(self) -> dict[str, t.Any]:
        """Your recent events, your review queue and per-status counts for your clubs."""
        return dashboard_service.dashboard_for(self.user())
