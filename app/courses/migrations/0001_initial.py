import uuid

import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="Timestamp when this record was last modified"
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "version",
                    models.PositiveIntegerField(default=1, help_text="Optimistic locking version"),
                ),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("thumbnail_url", models.URLField(blank=True, default="", max_length=500)),
                ("price", models.PositiveIntegerField(help_text="Price in whole units")),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending Review"),
                            ("approved", "Approved"),
                            ("declined", "Declined"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Review status (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("declined_at", models.DateTimeField(blank=True, null=True)),
                ("decline_reason", models.TextField(blank=True, default="")),
                (
                    "incentive_paid_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the one-time approval incentive was paid",
                        null=True,
                    ),
                ),
                (
                    "instructor",
                    models.ForeignKey(
                        help_text="Instructor who authored the course",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="courses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="course_status_created_idx"),
                    models.Index(
                        fields=["instructor", "status"], name="course_instructor_status_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gt", 0)), name="course_price_positive"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="CourseClass",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                ("title", models.CharField(blank=True, default="", max_length=200)),
                ("video_url", models.URLField(max_length=500)),
                ("audio_url", models.URLField(blank=True, default="", max_length=500)),
                ("text", models.TextField(blank=True, default="")),
                ("quiz", models.JSONField(blank=True, default=list)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="classes",
                        to="courses.course",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "course classes",
                "ordering": ["position"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("course", "position"), name="unique_course_class_position"
                    )
                ],
            },
        ),
    ]
