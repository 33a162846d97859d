"""Core notification dispatcher service."""

import typing as t

import structlog

from accounts.models import ClubUser
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.service.templates import render

logger = structlog.get_logger(__name__)


def create_notification(
    notification_type: NotificationType | str,
    user: ClubUser,
    context: dict[str, t.Any],
) -> Notification:
    """Create an in-app notification record.

    Raises:
        ValueError: If the notification type is unknown.
    """
    if isinstance(notification_type, str):
        notification_type = NotificationType(notification_type)

    title, body = render(notification_type, context)
    notification = Notification.objects.create(
        notification_type=notification_type,
        user=user,
        context=context,
        title=title,
        body=body,
    )

    logger.info(
        "notification_created",
        notification_id=str(notification.id),
        notification_type=notification_type,
        user_id=str(user.id),
    )

    return notification
