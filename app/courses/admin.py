"""
Django admin configuration for course models.

Status is changed through the approval gate (API), not the admin form.
"""

from django.contrib import admin

from courses.models import Course, CourseClass


class CourseClassInline(admin.TabularInline):
    model = CourseClass
    extra = 0
    fields = ["position", "title", "video_url", "audio_url"]


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["title", "instructor", "price", "status", "incentive_paid_at", "created_at"]
    list_filter = ["status"]
    search_fields = ["title", "instructor__email"]
    readonly_fields = [
        "id",
        "status",
        "approved_at",
        "declined_at",
        "decline_reason",
        "incentive_paid_at",
        "version",
        "created_at",
        "updated_at",
    ]
    inlines = [CourseClassInline]
    ordering = ["-created_at"]
