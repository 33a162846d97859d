import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from accounts.roles import CLUB_SCOPED_ROLES, AppRole
from common.models import TimeStampedModel


class ClubUserQueryset(models.QuerySet["ClubUser"]):
    """Queryset for ClubUser."""

    def with_role(self, *roles: str, club_id: uuid.UUID | None = None) -> t.Self:
        """Users holding any of ``roles``, optionally scoped to a club."""
        filters = Q(role_assignments__role__in=roles)
        if club_id is not None:
            filters &= Q(role_assignments__club_id=club_id)
        return self.filter(filters).distinct()


class ClubUserManager(UserManager["ClubUser"]):
    def get_queryset(self) -> ClubUserQueryset:
        """Get queryset for ClubUser."""
        return ClubUserQueryset(self.model)

    def with_role(self, *roles: str, club_id: uuid.UUID | None = None) -> ClubUserQueryset:
        """Proxy to the queryset method."""
        return self.get_queryset().with_role(*roles, club_id=club_id)


class ClubUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student_id = models.CharField(max_length=32, blank=True, default="", db_index=True)

    objects = ClubUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        return self.get_full_name() or self.username

    def __str__(self) -> str:
        return self.username


class RoleAssignment(TimeStampedModel):
    class UserType(models.TextChoices):
        STUDENT = "student", _("Student")
        STAFF = "psu_staff", _("Staff")

    user = models.ForeignKey(ClubUser, on_delete=models.CASCADE, related_name="role_assignments")
    role = models.CharField(max_length=32, choices=AppRole.choices, db_index=True)
    club = models.ForeignKey(
        "events.Club", on_delete=models.CASCADE, null=True, blank=True, related_name="role_assignments"
    )
    user_type = models.CharField(max_length=16, choices=UserType.choices, default=UserType.STUDENT)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role", "club"],
                condition=Q(club__isnull=False),
                name="unique_club_role_assignment",
            ),
            models.UniqueConstraint(
                fields=["user", "role"],
                condition=Q(club__isnull=True),
                name="unique_global_role_assignment",
            ),
        ]
        indexes = [models.Index(fields=["club", "role"])]

    def clean(self) -> None:
        """Club-bound roles must name their club."""
        super().clean()
        if self.role in CLUB_SCOPED_ROLES and self.club_id is None:
            raise ValidationError({"club": [_("This role must be assigned within a club.")]})

    def __str__(self) -> str:
        scope = f"@{self.club_id}" if self.club_id else ""
        return f"{self.user_id}:{self.role}{scope}"
