import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import events.models.checkin


def timestamps() -> list[tuple[str, models.Field]]:  # type: ignore[type-arg]
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
        ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
    ]


ROLE_CHOICES = [
    ("system_admin", "System Administrator"),
    ("president", "President"),
    ("vice_president", "Vice President"),
    ("general_director", "General Director"),
    ("academic_advisor", "Academic Advisor"),
    ("department_director", "Department Director"),
    ("project_manager", "Project Manager"),
    ("assistant_project_manager", "Assistant Project Manager"),
    ("member", "Member"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Club",
            fields=[
                *timestamps(),
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("logo_url", models.URLField(blank=True, default="")),
                ("active", models.BooleanField(db_index=True, default=True)),
                (
                    "approval_flow",
                    models.CharField(
                        choices=[("legacy", "Club then Student Affairs"), ("multi_level", "Multi-level")],
                        default="multi_level",
                        help_text="Which review process events of this club go through when submitted.",
                        max_length=16,
                    ),
                ),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Venue",
            fields=[
                *timestamps(),
                ("name", models.CharField(max_length=255, unique=True)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("capacity", models.PositiveIntegerField(help_text="Maximum number of attendees.")),
                ("active", models.BooleanField(db_index=True, default=True)),
                (
                    "open_from",
                    models.TimeField(blank=True, help_text="Start of daily operating hours (local time).", null=True),
                ),
                (
                    "open_to",
                    models.TimeField(blank=True, help_text="End of daily operating hours (local time).", null=True),
                ),
                ("amenities", models.JSONField(blank=True, default=list)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="BlackoutDate",
            fields=[
                *timestamps(),
                ("start_date", models.DateField(db_index=True)),
                ("end_date", models.DateField(db_index=True)),
                ("reason", models.CharField(max_length=255)),
                (
                    "venue",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="blackouts", to="events.venue"
                    ),
                ),
            ],
            options={
                "ordering": ["start_date"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="blackout_end_after_start",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                *timestamps(),
                ("title", models.CharField(db_index=True, max_length=200)),
                ("description", models.TextField()),
                ("category", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("start", models.DateTimeField(db_index=True)),
                ("end", models.DateTimeField(db_index=True)),
                (
                    "expected_attendees",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("risk_notes", models.TextField(blank=True, default="")),
                (
                    "policy_ack",
                    models.JSONField(
                        default=dict, help_text="Organiser acknowledgements: {safety: bool, compliance: bool}"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("submitted", "Submitted"),
                            ("club_approved", "Club approved"),
                            ("sa_approved", "Student Affairs approved"),
                            ("in_review", "In review"),
                            ("approved", "Approved"),
                            ("changes_required", "Changes required"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="draft",
                        editable=False,
                        max_length=20,
                    ),
                ),
                ("last_decision_at", models.DateTimeField(blank=True, editable=False, null=True)),
                ("reminder_sent_at", models.DateTimeField(blank=True, editable=False, null=True)),
                (
                    "club",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="events", to="events.club"
                    ),
                ),
                (
                    "venue",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="events", to="events.venue"
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="updated_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start"],
                "indexes": [
                    models.Index(fields=["venue", "start", "end"], name="idx_event_venue_window"),
                    models.Index(fields=["club", "status"], name="idx_event_club_status"),
                    models.Index(fields=["status", "start"], name="idx_event_status_start"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end__gt", models.F("start"))), name="event_end_after_start"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ApprovalLevel",
            fields=[
                *timestamps(),
                ("level", models.PositiveSmallIntegerField()),
                ("required_roles", models.JSONField(help_text="Role identifiers that may act on this level.")),
                (
                    "approval_rule",
                    models.CharField(
                        choices=[("AND", "Every listed role must approve"), ("OR", "Any listed role may approve")],
                        default="OR",
                        max_length=3,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        db_index=True,
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("comment", models.TextField(blank=True, default="")),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="decided_levels",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="approval_levels", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["event", "level"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "level"), name="unique_event_approval_level"),
                    models.CheckConstraint(condition=models.Q(("level__gte", 1)), name="approval_level_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LevelSignoff",
            fields=[
                *timestamps(),
                ("role", models.CharField(choices=ROLE_CHOICES, max_length=32)),
                ("comment", models.TextField(blank=True, default="")),
                (
                    "level",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="signoffs", to="events.approvallevel"
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="level_signoffs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("level", "role"), name="unique_signoff_per_role"),
                    models.UniqueConstraint(fields=("level", "user"), name="unique_signoff_per_user"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Approval",
            fields=[
                *timestamps(),
                ("stage", models.CharField(choices=[("club", "Club"), ("sa", "Student Affairs")], max_length=4)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("approved", "Approved"),
                            ("changes_required", "Changes required"),
                            ("rejected", "Rejected"),
                        ],
                        max_length=20,
                    ),
                ),
                ("comment", models.TextField(blank=True, default="")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="approvals", to="events.event"
                    ),
                ),
                (
                    "reviewer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="approvals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["created_at"]},
        ),
        migrations.CreateModel(
            name="CheckInToken",
            fields=[
                *timestamps(),
                (
                    "token",
                    models.CharField(
                        default=events.models.checkin.generate_check_in_token,
                        editable=False,
                        max_length=64,
                        unique=True,
                    ),
                ),
                ("expires_at", models.DateTimeField(db_index=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="check_in_tokens", to="events.event"
                    ),
                ),
                (
                    "issued_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="issued_tokens",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["event", "expires_at"], name="checkintoken_event_expires")],
            },
        ),
        migrations.CreateModel(
            name="Attendance",
            fields=[
                *timestamps(),
                ("guest_label", models.CharField(blank=True, default="", max_length=150)),
                ("checked_in_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="attendance", to="events.event"
                    ),
                ),
                (
                    "token",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="check_ins",
                        to="events.checkintoken",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["checked_in_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("user__isnull", False)),
                        fields=("event", "user"),
                        name="unique_member_attendance",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("guest_label", ""), ("user__isnull", False)),
                            models.Q(("user__isnull", True), models.Q(("guest_label", ""), _negated=True)),
                            _connector="OR",
                        ),
                        name="attendance_user_xor_guest",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventComment",
            fields=[
                *timestamps(),
                ("body", models.TextField()),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="comments", to="events.event"
                    ),
                ),
            ],
            options={"ordering": ["created_at"]},
        ),
        migrations.CreateModel(
            name="EventTemplate",
            fields=[
                *timestamps(),
                ("name", models.CharField(max_length=120)),
                ("title", models.CharField(blank=True, default="", max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("category", models.CharField(blank=True, default="", max_length=64)),
                (
                    "expected_attendees",
                    models.PositiveIntegerField(
                        blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("risk_notes", models.TextField(blank=True, default="")),
                (
                    "club",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="event_templates", to="events.club"
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="event_templates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(fields=("club", "name"), name="unique_club_template_name")
                ],
            },
        ),
    ]
