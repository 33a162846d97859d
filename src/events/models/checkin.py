import secrets
import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from common.models import TimeStampedModel

from .event import Event


def generate_check_in_token() -> str:
    """32 random bytes, URL-safe."""
    return secrets.token_urlsafe(32)


class CheckInTokenQuerySet(models.QuerySet["CheckInToken"]):
    def live(self) -> t.Self:
        """Tokens that have not expired yet."""
        return self.filter(expires_at__gt=timezone.now())


class CheckInToken(TimeStampedModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="check_in_tokens")
    token = models.CharField(max_length=64, unique=True, default=generate_check_in_token, editable=False)
    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="issued_tokens"
    )
    expires_at = models.DateTimeField(db_index=True)

    objects = CheckInTokenQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["event", "expires_at"], name="checkintoken_event_expires")]

    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    def __str__(self) -> str:
        return f"Check-in token for {self.event_id} until {self.expires_at:%Y-%m-%d %H:%M}"


class Attendance(TimeStampedModel):
    """One check-in. Members are recorded once per event; guests every time."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendance")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name="attendance"
    )
    guest_label = models.CharField(max_length=150, blank=True, default="")
    token = models.ForeignKey(
        CheckInToken, on_delete=models.SET_NULL, null=True, blank=True, related_name="check_ins"
    )
    checked_in_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["checked_in_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                condition=Q(user__isnull=False),
                name="unique_member_attendance",
            ),
            models.CheckConstraint(
                condition=(Q(user__isnull=False) & Q(guest_label="")) | (Q(user__isnull=True) & ~Q(guest_label="")),
                name="attendance_user_xor_guest",
            ),
        ]

    def clean(self) -> None:
        """Exactly one of user and guest label."""
        super().clean()
        if (self.user_id is None) == (not self.guest_label):
            raise ValidationError(_("A check-in needs either a user or a guest label, not both."))

    def validate_constraints(self, exclude: t.Collection[str] | None = None) -> None:
        """Leave member uniqueness to the database so concurrent check-ins resolve there."""
        super().validate_constraints(exclude={*(exclude or ()), "user"})

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def __str__(self) -> str:
        who = self.guest_label or str(self.user_id)
        return f"{who} at {self.event_id}"
