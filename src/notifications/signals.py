"""Signals for the notification system."""

from django.dispatch import Signal

# Signal for requesting notification dispatch
# Expected kwargs:
#   - notification_type: NotificationType enum value
#   - user: ClubUser instance
#   - context: dict with the subject's identifiers and display fields
notification_requested = Signal()
