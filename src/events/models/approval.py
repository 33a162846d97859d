from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from accounts.roles import AppRole
from common.models import TimeStampedModel

from .event import Event


class ApprovalLevelQuerySet(models.QuerySet["ApprovalLevel"]):
    def pending(self) -> "ApprovalLevelQuerySet":
        return self.filter(status=ApprovalLevel.Status.PENDING)


class ApprovalLevel(TimeStampedModel):
    """One rung of the multi-level approval ladder of an event."""

    class Rule(models.TextChoices):
        AND = "AND", _("Every listed role must approve")
        OR = "OR", _("Any listed role may approve")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="approval_levels")
    level = models.PositiveSmallIntegerField()
    required_roles = models.JSONField(help_text="Role identifiers that may act on this level.")
    approval_rule = models.CharField(max_length=3, choices=Rule.choices, default=Rule.OR)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="decided_levels"
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    comment = models.TextField(blank=True, default="")

    objects = ApprovalLevelQuerySet.as_manager()

    class Meta:
        ordering = ["event", "level"]
        constraints = [
            models.UniqueConstraint(fields=["event", "level"], name="unique_event_approval_level"),
            models.CheckConstraint(condition=Q(level__gte=1), name="approval_level_positive"),
        ]

    def clean(self) -> None:
        """Required roles must be a non-empty list of known roles."""
        super().clean()
        roles = self.required_roles
        if not isinstance(roles, list) or not roles:
            raise ValidationError({"required_roles": [_("At least one role is required.")]})
        unknown = [r for r in roles if r not in AppRole.values]
        if unknown:
            raise ValidationError({"required_roles": [_("Unknown roles: %(roles)s") % {"roles": ", ".join(unknown)}]})

    def __str__(self) -> str:
        return f"Level {self.level} of {self.event_id} ({self.status})"


class LevelSignoff(TimeStampedModel):
    """A single reviewer satisfying one required role of a level."""

    level = models.ForeignKey(ApprovalLevel, on_delete=models.CASCADE, related_name="signoffs")
    role = models.CharField(max_length=32, choices=AppRole.choices)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="level_signoffs")
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["level", "role"], name="unique_signoff_per_role"),
            models.UniqueConstraint(fields=["level", "user"], name="unique_signoff_per_user"),
        ]


class Approval(TimeStampedModel):
    """An append-only reviewer decision of the two-stage flow."""

    class Stage(models.TextChoices):
        CLUB = "club", _("Club")
        SA = "sa", _("Student Affairs")

    class Decision(models.TextChoices):
        APPROVED = "approved", _("Approved")
        CHANGES_REQUIRED = "changes_required", _("Changes required")
        REJECTED = "rejected", _("Rejected")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="approvals")
    reviewer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="approvals")
    stage = models.CharField(max_length=4, choices=Stage.choices)
    status = models.CharField(max_length=20, choices=Decision.choices)
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["created_at"]

    def save(self, *args: object, **kwargs: object) -> None:
        """Decisions are written once."""
        if not self._state.adding:
            raise ValidationError(_("Approval records cannot be modified."))
        super().save(*args, **kwargs)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return f"{self.stage}:{self.status} on {self.event_id}"
