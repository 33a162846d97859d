"""Helper functions for sending notifications.

This module contains high-level notification helper functions called by the
approval workflow, the comment service and the reminder task. Every helper
emits ``notification_requested``; rows are written after commit.
"""

import typing as t
from collections.abc import Iterable

import structlog
from django.utils.dateformat import format as date_format

from accounts.models import ClubUser
from events.models import Event, EventComment
from notifications.enums import NotificationType
from notifications.signals import notification_requested

logger = structlog.get_logger(__name__)


def build_event_context(event: Event) -> dict[str, t.Any]:
    """Base context shared by every event notification."""
    return {
        "event_id": str(event.id),
        "event_title": event.title,
        "event_status": event.status,
        "event_start": date_format(event.start, "l, F j, Y \\a\\t g:i A T"),
        "club_id": str(event.club_id),
        "club_name": event.club.name,
        "venue_name": event.venue.name,
    }


def notify_event_submitted(event: Event, recipients: Iterable[ClubUser], level: int | None = None) -> int:
    """Tell the identities able to act next that an event awaits them.

    Returns:
        Number of notifications requested
    """
    context = build_event_context(event)
    if level is not None:
        context["level"] = level

    count = 0
    for user in recipients:
        if user.id == event.created_by_id:
            continue
        notification_requested.send(
            sender=notify_event_submitted,
            user=user,
            notification_type=NotificationType.EVENT_SUBMITTED,
            context=context,
        )
        count += 1

    logger.info("event_submitted_notifications_sent", event_id=str(event.id), level=level, count=count)
    return count


def notify_event_decision(
    event: Event,
    notification_type: NotificationType,
    *,
    actor: ClubUser,
    comment: str = "",
    level: int | None = None,
) -> None:
    """Tell the creator about a reviewer's decision."""
    context = build_event_context(event)
    context.update(
        {
            "reviewer_id": str(actor.id),
            "reviewer_name": actor.display_name,
            "comment": comment,
        }
    )
    if level is not None:
        context["level"] = level

    notification_requested.send(
        sender=notify_event_decision,
        user=event.created_by,
        notification_type=notification_type,
        context=context,
    )
    logger.info(
        "event_decision_notification_sent",
        event_id=str(event.id),
        notification_type=notification_type,
        actor_id=str(actor.id),
    )


def notify_comment_added(comment: EventComment) -> bool:
    """Tell the creator someone commented on their event.

    Returns:
        False when the creator commented on their own event.
    """
    event = comment.event
    if comment.author_id == event.created_by_id:
        return False

    context = build_event_context(event)
    context.update(
        {
            "comment_id": str(comment.id),
            "author_id": str(comment.author_id),
            "author_name": comment.author.display_name,
            "comment": comment.body,
        }
    )
    notification_requested.send(
        sender=EventComment,
        user=event.created_by,
        notification_type=NotificationType.COMMENT_ADDED,
        context=context,
    )
    return True


def notify_event_reminder(event: Event, recipients: Iterable[ClubUser]) -> int:
    """Send an upcoming-event reminder to each recipient once."""
    context = build_event_context(event)
    count = 0
    seen: set[t.Any] = set()
    for user in recipients:
        if user.id in seen:
            continue
        seen.add(user.id)
        notification_requested.send(
            sender=Event,
            user=user,
            notification_type=NotificationType.EVENT_REMINDER,
            context=context,
        )
        count += 1
    return count
