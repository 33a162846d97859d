import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("event_submitted", "Event Submitted"),
                            ("event_club_approved", "Event Club Approved"),
                            ("event_sa_approved", "Event Sa Approved"),
                            ("event_level_approved", "Event Level Approved"),
                            ("event_approved", "Event Approved"),
                            ("event_changes_required", "Event Changes Required"),
                            ("event_rejected", "Event Rejected"),
                            ("event_reminder", "Event Reminder"),
                            ("comment_added", "Comment Added"),
                        ],
                        db_index=True,
                        max_length=50,
                    ),
                ),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("body", models.TextField(blank=True, default="")),
                ("context", models.JSONField(blank=True, default=dict)),
                ("read_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "read_at"], name="notificatio_user_id_8a7c3e_idx"),
                    models.Index(fields=["user", "created_at"], name="notificatio_user_id_2f41d9_idx"),
                ],
            },
        ),
    ]
