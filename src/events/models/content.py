from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from common.models import TimeStampedModel

from .club import Club
from .event import Event


class EventComment(TimeStampedModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_comments")
    body = models.TextField()

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"Comment by {self.author_id} on {self.event_id}"


class EventTemplate(TimeStampedModel):
    """Reusable prefill for the event form of a club."""

    club = models.ForeignKey(Club, on_delete=models.CASCADE, related_name="event_templates")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="event_templates"
    )
    name = models.CharField(max_length=120)
    title = models.CharField(max_length=200, blank=True, default="")
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=64, blank=True, default="")
    expected_attendees = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    risk_notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["name"]
        constraints = [models.UniqueConstraint(fields=["club", "name"], name="unique_club_template_name")]

    def __str__(self) -> str:
        return self.name
