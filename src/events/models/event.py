import typing as t
from datetime import datetime

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import capabilities_for
from common.models import TimeStampedModel

from .club import Club
from .venue import Venue

POLICY_ACK_KEYS = ("safety", "compliance")


class EventQuerySet(models.QuerySet["Event"]):
    def with_relations(self) -> t.Self:
        """Select the club, venue and creator in the same query."""
        return self.select_related("club", "venue", "created_by")

    def blocking(self) -> t.Self:
        """Events that occupy their venue slot. Rejected events free it."""
        return self.exclude(status=Event.EventStatus.REJECTED)

    def overlapping(self, start: datetime, end: datetime) -> t.Self:
        """Events whose half-open window intersects ``[start, end)``."""
        return self.filter(start__lt=end, end__gt=start)

    def approved(self) -> t.Self:
        return self.filter(status__in=[Event.EventStatus.APPROVED, Event.EventStatus.SA_APPROVED])

    def for_user(self, user: ClubUser | AnonymousUser) -> t.Self:
        """Events ``user`` may see.

        - Approved events are visible to every signed-in user.
        - Creators always see their own events.
        - Club role holders see every event of their clubs.
        - Reviewers see everything that has left draft.
        """
        if user.is_anonymous:
            return self.none()
        roles = capabilities_for(user)
        visible = Q(status__in=[Event.EventStatus.APPROVED, Event.EventStatus.SA_APPROVED]) | Q(created_by=user)
        if clubs := roles.clubs():
            visible |= Q(club_id__in=clubs)
        if roles.can_approve():
            visible |= ~Q(status=Event.EventStatus.DRAFT)
        return self.filter(visible)


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def with_relations(self) -> EventQuerySet:
        return self.get_queryset().with_relations()

    def blocking(self) -> EventQuerySet:
        return self.get_queryset().blocking()

    def approved(self) -> EventQuerySet:
        return self.get_queryset().approved()

    def for_user(self, user: ClubUser | AnonymousUser) -> EventQuerySet:
        """Get the queryset based on the user."""
        return self.get_queryset().for_user(user)


class Event(TimeStampedModel):
    class EventStatus(models.TextChoices):
        DRAFT = "draft", _("Draft")
        SUBMITTED = "submitted", _("Submitted")
        CLUB_APPROVED = "club_approved", _("Club approved")
        SA_APPROVED = "sa_approved", _("Student Affairs approved")
        IN_REVIEW = "in_review", _("In review")
        APPROVED = "approved", _("Approved")
        CHANGES_REQUIRED = "changes_required", _("Changes required")
        REJECTED = "rejected", _("Rejected")

    club = models.ForeignKey(Club, on_delete=models.PROTECT, related_name="events")
    venue = models.ForeignKey(Venue, on_delete=models.PROTECT, related_name="events")
    title = models.CharField(max_length=200, db_index=True)
    description = models.TextField()
    category = models.CharField(max_length=64, blank=True, default="", db_index=True)
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField(db_index=True)
    expected_attendees = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    risk_notes = models.TextField(blank=True, default="")
    policy_ack = models.JSONField(default=dict, help_text="Organiser acknowledgements: {safety: bool, compliance: bool}")
    status = models.CharField(
        max_length=20, choices=EventStatus.choices, default=EventStatus.DRAFT, db_index=True, editable=False
    )
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="created_events")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="updated_events"
    )
    last_decision_at = models.DateTimeField(null=True, blank=True, editable=False)
    reminder_sent_at = models.DateTimeField(null=True, blank=True, editable=False)

    objects = EventManager()

    class Meta:
        ordering = ["start"]
        constraints = [
            models.CheckConstraint(condition=Q(end__gt=F("start")), name="event_end_after_start"),
        ]
        indexes = [
            models.Index(fields=["venue", "start", "end"], name="idx_event_venue_window"),
            models.Index(fields=["club", "status"], name="idx_event_club_status"),
            models.Index(fields=["status", "start"], name="idx_event_status_start"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.start:%Y-%m-%d %H:%M})"

    def clean(self) -> None:
        """Validate the window, the acknowledgements and the venue fit."""
        super().clean()
        errors: dict[str, list[t.Any]] = {}
        if self.start and self.end and self.end <= self.start:
            errors.setdefault("end", []).append(_("End time must be after start time."))
        ack = self.policy_ack if isinstance(self.policy_ack, dict) else {}
        if not all(ack.get(key) is True for key in POLICY_ACK_KEYS):
            errors.setdefault("policy_ack", []).append(
                _("Both the safety and the compliance policy must be acknowledged.")
            )
        if self.venue_id and self.expected_attendees:
            venue = self.venue
            if not venue.active and self._venue_changed():
                errors.setdefault("venue", []).append(_("This venue is not available for booking."))
            if self.expected_attendees > venue.capacity:
                errors.setdefault("expected_attendees", []).append(
                    _("Expected attendees exceed the venue capacity of %(capacity)s.") % {"capacity": venue.capacity}
                )
            if self.start and self.end and not self._within_operating_hours(venue):
                errors.setdefault("start", []).append(_("The event falls outside the venue's operating hours."))
        if errors:
            raise ValidationError(errors)

    def _venue_changed(self) -> bool:
        if self._state.adding:
            return True
        return not Event.objects.filter(pk=self.pk, venue_id=self.venue_id).exists()

    def _within_operating_hours(self, venue: Venue) -> bool:
        if venue.open_from is None or venue.open_to is None:
            return True
        start = timezone.localtime(self.start)
        end = timezone.localtime(self.end)
        if start.date() != end.date():
            return False
        return venue.open_from <= start.time() and end.time() <= venue.open_to
