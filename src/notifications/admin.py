from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils import timezone

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["notification_type", "user", "title", "created_at", "read"]
    list_filter = ["notification_type", ("read_at", admin.EmptyFieldListFilter)]
    search_fields = ["user__username", "user__email", "title"]
    readonly_fields = ["user", "notification_type", "title", "body", "context", "created_at", "read_at"]
    date_hierarchy = "created_at"
    actions = ["mark_as_read"]

    @admin.display(boolean=True, description="Read")
    def read(self, obj: Notification) -> bool:
        return obj.read_at is not None

    @admin.action(description="Mark selected notifications as read")
    def mark_as_read(self, request: HttpRequest, queryset: QuerySet[Notification]) -> None:
        updated = queryset.filter(read_at__isnull=True).update(read_at=timezone.now())
        self.message_user(request, f"{updated} notification(s) marked as read.")
