"""Service for sending event reminder notifications."""

import typing as t
from datetime import timedelta

import structlog
from django.conf import settings
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import ClubUser
from accounts.roles import CLUB_SCOPED_ROLES
from events.models import Event
from notifications.service import notification_helpers

logger = structlog.get_logger(__name__)


class EventReminderService:
    """Service for managing event reminder notifications.

    Approved events starting within the lead window get one reminder for the
    creator and every club role holder. ``reminder_sent_at`` is claimed with a
    conditional update so overlapping runs never remind twice.
    """

    def __init__(self, lead_hours: int | None = None):
        """Initialize the reminder service.

        Args:
            lead_hours: Hours before start to remind (default: EVENT_REMINDER_LEAD_HOURS)
        """
        self.lead_hours = lead_hours if lead_hours is not None else settings.EVENT_REMINDER_LEAD_HOURS

    def get_events_for_reminder(self) -> QuerySet[Event]:
        """Approved events starting inside the lead window that have not been reminded."""
        now = timezone.now()
        return (
            Event.objects.approved()
            .filter(start__gt=now, start__lte=now + timedelta(hours=self.lead_hours), reminder_sent_at__isnull=True)
            .select_related("club", "venue", "created_by")
        )

    def claim(self, event: Event) -> bool:
        """Mark the reminder as sent. False when another run got there first."""
        claimed = Event.objects.filter(pk=event.pk, reminder_sent_at__isnull=True).update(
            reminder_sent_at=timezone.now()
        )
        return claimed == 1

    def recipients_for(self, event: Event) -> list[ClubUser]:
        users = list(ClubUser.objects.with_role(*CLUB_SCOPED_ROLES, club_id=event.club_id).filter(is_active=True))
        return [event.created_by, *users]

    def send_all_reminders(self) -> dict[str, t.Any]:
        """Send reminders for all upcoming events.

        Returns:
            Statistics dictionary with event and reminder counts
        """
        events = list(self.get_events_for_reminder())
        logger.info("event_reminder_scan", lead_hours=self.lead_hours, events_found=len(events))

        reminders_sent = 0
        events_reminded = 0
        for event in events:
            if not self.claim(event):
                logger.info("event_reminder_already_claimed", event_id=str(event.id))
                continue
            reminders_sent += notification_helpers.notify_event_reminder(event, self.recipients_for(event))
            events_reminded += 1

        logger.info("event_reminders_sent", events=events_reminded, count=reminders_sent)
        return {"events_reminded": events_reminded, "reminders_sent": reminders_sent}
