import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("accounts", "0001_initial"),
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="RoleAssignment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("system_admin", "System Administrator"),
                            ("president", "President"),
                            ("vice_president", "Vice President"),
                            ("general_director", "General Director"),
                            ("academic_advisor", "Academic Advisor"),
                            ("department_director", "Department Director"),
                            ("project_manager", "Project Manager"),
                            ("assistant_project_manager", "Assistant Project Manager"),
                            ("member", "Member"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                (
                    "user_type",
                    models.CharField(
                        choices=[("student", "Student"), ("psu_staff", "Staff")], default="student", max_length=16
                    ),
                ),
                (
                    "club",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="role_assignments",
                        to="events.club",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="role_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["club", "role"], name="accounts_ro_club_id_3c9f1e_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("club__isnull", False)),
                        fields=("user", "role", "club"),
                        name="unique_club_role_assignment",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("club__isnull", True)),
                        fields=("user", "role"),
                        name="unique_global_role_assignment",
                    ),
                ],
            },
        ),
    ]
