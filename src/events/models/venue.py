import typing as t

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from common.models import TimeStampedModel


class VenueQuerySet(models.QuerySet["Venue"]):
    def active(self) -> t.Self:
        """Only venues that can currently be booked."""
        return self.filter(active=True)


class VenueManager(models.Manager["Venue"]):
    def get_queryset(self) -> VenueQuerySet:
        """Get base queryset."""
        return VenueQuerySet(self.model, using=self._db)

    def active(self) -> VenueQuerySet:
        """Returns only active venues."""
        return self.get_queryset().active()


class Venue(TimeStampedModel):
    """A bookable place. Events at the same venue may not overlap."""

    name = models.CharField(max_length=255, unique=True)
    location = models.CharField(max_length=255, blank=True, default="")
    capacity = models.PositiveIntegerField(help_text="Maximum number of attendees.")
    active = models.BooleanField(default=True, db_index=True)
    open_from = models.TimeField(null=True, blank=True, help_text="Start of daily operating hours (local time).")
    open_to = models.TimeField(null=True, blank=True, help_text="End of daily operating hours (local time).")
    amenities = models.JSONField(default=list, blank=True)

    objects = VenueManager()

    class Meta:
        ordering = ["name"]

    def clean(self) -> None:
        """Operating hours must be a forward window when both ends are set."""
        super().clean()
        if self.open_from and self.open_to and self.open_to <= self.open_from:
            raise ValidationError({"open_to": [_("Closing time must be after opening time.")]})
        if not isinstance(self.amenities, list) or not all(isinstance(a, str) for a in self.amenities):
            raise ValidationError({"amenities": [_("Amenities must be a list of strings.")]})

    def __str__(self) -> str:
        return self.name


class BlackoutDate(TimeStampedModel):
    """Whole days on which a venue cannot be booked. Both ends inclusive."""

    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name="blackouts")
    start_date = models.DateField(db_index=True)
    end_date = models.DateField(db_index=True)
    reason = models.CharField(max_length=255)

    class Meta:
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(condition=Q(end_date__gte=F("start_date")), name="blackout_end_after_start"),
        ]

    def __str__(self) -> str:
        return f"{self.venue_id}: {self.start_date} - {self.end_date} ({self.reason})"
