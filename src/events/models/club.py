from django.db import models
from django.utils.translation import gettext_lazy as _

from common.models import TimeStampedModel


class Club(TimeStampedModel):
    class ApprovalFlow(models.TextChoices):
        LEGACY = "legacy", _("Club then Student Affairs")
        MULTI_LEVEL = "multi_level", _("Multi-level")

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    logo_url = models.URLField(blank=True, default="")
    active = models.BooleanField(default=True, db_index=True)
    approval_flow = models.CharField(
        max_length=16,
        choices=ApprovalFlow.choices,
        default=ApprovalFlow.MULTI_LEVEL,
        help_text="Which review process events of this club go through when submitted.",
    )

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
