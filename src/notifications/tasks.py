"""Celery tasks for notification maintenance."""

import typing as t
from datetime import timedelta

import structlog
from celery import shared_task
from django.conf import settings
from django.utils import timezone

from notifications.models import Notification
from notifications.service.reminder_service import EventReminderService

logger = structlog.get_logger(__name__)


@shared_task
def send_event_reminders() -> dict[str, t.Any]:
    """Remind creators and club officers of approved events starting soon.

    Runs hourly via Celery beat.
    """
    return EventReminderService().send_all_reminders()


@shared_task
def cleanup_old_notifications() -> dict[str, t.Any]:
    """Delete notifications older than NOTIFICATION_RETENTION_DAYS, read or not."""
    retention_days = settings.NOTIFICATION_RETENTION_DAYS
    cutoff = timezone.now() - timedelta(days=retention_days)

    deleted_count, _ = Notification.objects.filter(created_at__lt=cutoff).delete()

    logger.info("notifications_cleaned_up", retention_days=retention_days, deleted_count=deleted_count)

    return {"deleted_count": deleted_count, "retention_days": retention_days}
