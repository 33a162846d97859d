from django.db.models import Q
from ninja import FilterSchema

from .enums import NotificationType


class NotificationFilterSchema(FilterSchema):
    unread_only: bool = False
    notification_type: NotificationType | None = None
    event_id: str | None = None

    def filter_unread_only(self, unread_only: bool) -> Q:
        """Helper to find unread only notifications."""
        if unread_only:
            return Q(read_at__isnull=True)
        return Q()

    def filter_event_id(self, event_id: str | None) -> Q:
        """Notifications about a single event."""
        if event_id:
            return Q(context__event_id=event_id)
        return Q()
