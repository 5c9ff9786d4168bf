"""
Course models.

- Course: Authored course with a price and a review status
- CourseClass: One ordered lesson of a course (video, optional audio and
  text, quiz questions)

Usage:
    from courses.models import Course, CourseStatus

    Course.objects.filter(status=CourseStatus.APPROVED)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin, VersionedMixin
from core.models import BaseModel

from courses.states import CourseStatus


class Course(UUIDPrimaryKeyMixin, VersionedMixin, BaseModel):
    """
    A course authored by an instructor.

    State Flow:
        PENDING -> APPROVED | DECLINED
        APPROVED | DECLINED -> PENDING (on edit)

    Fields:
        instructor: Owner; receives payouts and the approval incentive
        title / description / thumbnail_url: Catalog display data
        price: Positive whole units
        status: Review status (FSM, protected)
        approved_at / declined_at: Last review outcome timestamps
        decline_reason: Reason given with the last decline
        incentive_paid_at: When the one-time approval incentive was paid
    """

    instructor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="courses",
        help_text="Instructor who authored the course",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    thumbnail_url = models.URLField(max_length=500, blank=True, default="")
    price = models.PositiveIntegerField(help_text="Price in whole units")

    status = FSMField(
        default=CourseStatus.PENDING,
        choices=CourseStatus.choices,
        db_index=True,
        protected=True,
        help_text="Review status (managed by FSM)",
    )

    approved_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)
    decline_reason = models.TextField(blank=True, default="")
    incentive_paid_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the one-time approval incentive was paid",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="course_status_created_idx"),
            models.Index(fields=["instructor", "status"], name="course_instructor_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="course_price_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"

    @transition(field=status, source=CourseStatus.PENDING, target=CourseStatus.APPROVED)
    def approve(self):
        self.approved_at = timezone.now()
        self.decline_reason = ""

    @transition(field=status, source=CourseStatus.PENDING, target=CourseStatus.DECLINED)
    def decline(self, reason: str = ""):
        self.declined_at = timezone.now()
        self.decline_reason = reason

    @transition(
        field=status,
        source=[CourseStatus.APPROVED, CourseStatus.DECLINED],
        target=CourseStatus.PENDING,
    )
    def resubmit(self):
        """Edited courses go back to review and leave the catalog."""
        self.approved_at = None
        self.declined_at = None


class CourseClass(models.Model):
    """
    One lesson of a course.

    Classes have no identity outside their course; an edit replaces the
    whole list.

    Fields:
        position: 0-based order within the course
        video_url: Required lesson video
        audio_url / text: Optional material
        quiz: List of {"question", "options", "answer"} dicts
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="classes",
    )
    position = models.PositiveIntegerField(default=0)
    title = models.CharField(max_length=200, blank=True, default="")
    video_url = models.URLField(max_length=500)
    audio_url = models.URLField(max_length=500, blank=True, default="")
    text = models.TextField(blank=True, default="")
    quiz = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["position"]
        verbose_name_plural = "course classes"
        constraints = [
            models.UniqueConstraint(
                fields=["course", "position"],
                name="unique_course_class_position",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.course_id} #{self.position}"
