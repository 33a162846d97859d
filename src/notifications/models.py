from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel
from notifications.enums import NotificationType


class NotificationQuerySet(models.QuerySet["Notification"]):
    def unread(self) -> "NotificationQuerySet":
        return self.filter(read_at__isnull=True)


class Notification(TimeStampedModel):
    """One inbox entry for one recipient.

    The subject (event, comment, level) is only referenced through ``context``,
    so deleting an event leaves its history readable.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    notification_type = models.CharField(max_length=50, choices=NotificationType.choices, db_index=True)
    title = models.CharField(max_length=255, blank=True, default="")
    body = models.TextField(blank=True, default="")
    context = models.JSONField(default=dict, blank=True)
    read_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "read_at"]),
            models.Index(fields=["user", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.get_notification_type_display()} -> {self.user_id}"

    def set_read(self, read: bool) -> None:
        """Flip the read marker; a no-op when it already matches."""
        if read == (self.read_at is not None):
            return
        self.read_at = timezone.now() if read else None
        self.save(update_fields=["read_at", "updated_at"])
