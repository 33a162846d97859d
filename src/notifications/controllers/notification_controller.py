"""In-app inbox: review decisions, comments and reminders addressed to the caller."""

from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from django.utils import timezone
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from notifications.filters import NotificationFilterSchema
from notifications.models import Notification
from notifications.schema import MarkAllReadSchema, NotificationSchema, UnreadCountSchema


@api_controller("/notifications", tags=["Notifications"], auth=JWTAuth(), throttle=UserDefaultThrottle())
class NotificationController(UserAwareController):
    def inbox(self) -> QuerySet[Notification]:
        return Notification.objects.filter(user=self.user())

    def own(self, notification_id: UUID) -> Notification:
        """Someone else's notification is reported as missing."""
        return get_object_or_404(self.inbox(), pk=notification_id)

    @route.get("", url_name="list_notifications", response=PaginatedResponseSchema[NotificationSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_notifications(
        self,
        params: NotificationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[Notification]:
        """Newest first; filter by ``unread_only``, ``notification_type`` or ``event_id``."""
        return params.filter(self.inbox().order_by("-created_at"))

    @route.get("/unread-count", url_name="notification_unread_count", response=UnreadCountSchema)
    def unread_count(self) -> dict[str, int]:
        return {"count": self.inbox().unread().count()}

    @route.post(
        "/{notification_id}/mark-read",
        url_name="mark_notification_read",
        response=NotificationSchema,
        throttle=WriteThrottle(),
    )
    def read(self, notification_id: UUID) -> Notification:
        notification = self.own(notification_id)
        notification.set_read(True)
        return notification

    @route.post(
        "/{notification_id}/mark-unread",
        url_name="mark_notification_unread",
        response=NotificationSchema,
        throttle=WriteThrottle(),
    )
    def unread(self, notification_id: UUID) -> Notification:
        notification = self.own(notification_id)
        notification.set_read(False)
        return notification

    @route.post(
        "/mark-all-read", url_name="mark_all_notifications_read", response=MarkAllReadSchema, throttle=WriteThrottle()
    )
    def read_all(self) -> dict[str, int]:
        """Clear the unread badge in one statement."""
        now = timezone.now()
        return {"updated": self.inbox().unread().update(read_at=now, updated_at=now)}
