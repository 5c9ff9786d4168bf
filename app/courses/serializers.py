"""
DRF serializers for course endpoints.

This module provides serializers for:
- Course submission (nested classes and quiz questions)
- Catalog and detail responses
- Approval and decline requests

Shape is validated here; business rules (answer among options, option
count, positive price) are enforced again in CourseService so non-HTTP
callers get the same guarantees.
"""

from __future__ import annotations

from rest_framework import serializers

from courses.models import Course, CourseClass
from courses.validators import MAX_COURSE_PRICE


class QuizQuestionSerializer(serializers.Serializer):
    question = serializers.CharField()
    options = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    answer = serializers.CharField()


class CourseClassInputSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True, max_length=200)
    video_url = serializers.URLField(max_length=500)
    audio_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    text = serializers.CharField(required=False, allow_blank=True)
    quiz = QuizQuestionSerializer(many=True, required=False)


class CourseWriteSerializer(serializers.Serializer):
    """
    Request body for creating or updating a course.

    Fields:
        title, description, thumbnail_url, price
        classes: Ordered list of classes (at least one)
        version: Optional optimistic-locking version for updates
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    thumbnail_url = serializers.URLField(
        required=False, allow_blank=True, max_length=500, default=""
    )
    price = serializers.IntegerField(min_value=1, max_value=MAX_COURSE_PRICE)
    classes = CourseClassInputSerializer(many=True, allow_empty=False)
    version = serializers.IntegerField(required=False, min_value=1)


class CourseClassSerializer(serializers.ModelSerializer):
    class Meta:
        model = CourseClass
        fields = ["position", "title", "video_url", "audio_url", "text", "quiz"]
        read_only_fields = fields


class CourseSummarySerializer(serializers.ModelSerializer):
    """Catalog entry (no class content)."""

    instructor_name = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            "id",
            "title",
            "description",
            "thumbnail_url",
            "price",
            "status",
            "instructor",
            "instructor_name",
            "created_at",
        ]
        read_only_fields = fields

    def get_instructor_name(self, obj: Course) -> str:
        return obj.instructor.get_full_name()


class CourseDetailSerializer(CourseSummarySerializer):
    """Full course including classes and review information."""

    classes = CourseClassSerializer(many=True, read_only=True)

    class Meta(CourseSummarySerializer.Meta):
        fields = CourseSummarySerializer.Meta.fields + [
            "classes",
            "approved_at",
            "declined_at",
            "decline_reason",
            "version",
            "updated_at",
        ]
        read_only_fields = fields


class CourseApproveSerializer(serializers.Serializer):
    operator_secret = serializers.CharField(trim_whitespace=False)


class CourseDeclineSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
