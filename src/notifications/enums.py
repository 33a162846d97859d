"""Enums for the notification system."""

from django.db.models import TextChoices


class NotificationType(TextChoices):
    """All notification types in the system."""

    # Review workflow
    EVENT_SUBMITTED = "event_submitted"
    EVENT_CLUB_APPROVED = "event_club_approved"
    EVENT_SA_APPROVED = "event_sa_approved"
    EVENT_LEVEL_APPROVED = "event_level_approved"
    EVENT_APPROVED = "event_approved"
    EVENT_CHANGES_REQUIRED = "event_changes_required"
    EVENT_REJECTED = "event_rejected"

    # Event activity
    EVENT_REMINDER = "event_reminder"
    COMMENT_ADDED = "comment_added"
