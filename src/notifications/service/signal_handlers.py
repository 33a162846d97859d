"""Signal handlers for notification system."""

import typing as t

import structlog
from django.db import transaction
from django.dispatch import receiver

from notifications.service.dispatcher import create_notification
from notifications.signals import notification_requested

logger = structlog.get_logger(__name__)


def _sender_name(sender: t.Any) -> str:
    return sender.__name__ if hasattr(sender, "__name__") else str(sender)


@receiver(notification_requested)
def handle_notification_request(sender: t.Any, **kwargs: t.Any) -> None:
    """Handle notification_requested signal.

    The notification row is written once the sender's transaction commits, so a
    rolled-back transition never notifies anyone.

    IMPORTANT: This handler MUST NOT raise exceptions to prevent crashes in endpoints/signals.
    All errors are logged and swallowed.

    Expected kwargs:
        - notification_type: NotificationType enum value or string
        - user: ClubUser instance
        - context: dict of display fields
    """
    notification_type = kwargs.get("notification_type")
    user = kwargs.get("user")
    context = kwargs.get("context", {})

    if not notification_type or not user:
        logger.error(
            "invalid_notification_request",
            notification_type=notification_type,
            user=user,
            sender=_sender_name(sender),
        )
        return

    def _create() -> None:
        try:
            notification = create_notification(notification_type=notification_type, user=user, context=context)
            logger.info(
                "notification_request_handled",
                notification_id=str(notification.id),
                notification_type=notification_type,
                user_id=str(user.id),
                sender=_sender_name(sender),
            )
        except Exception as e:
            # Never let notification errors crash endpoints/signals
            logger.exception(
                "notification_request_failed",
                notification_type=notification_type,
                user_id=str(user.id),
                sender=_sender_name(sender),
                error=str(e),
                error_type=type(e).__name__,
            )

    transaction.on_commit(_create)
