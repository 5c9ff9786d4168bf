"""
URL configuration for courses app.

URL structure:
    /api/v1/courses/                 - Catalog (GET), submit (POST)
    /api/v1/courses/mine/            - Instructor's courses
    /api/v1/courses/pending/         - Admin review queue
    /api/v1/courses/{id}/            - Detail, update, delete
    /api/v1/courses/{id}/approve/    - Approve (admin + operator secret)
    /api/v1/courses/{id}/decline/    - Decline (admin)
"""

from django.urls import path

from courses import views

app_name = "courses"

urlpatterns = [
    path("", views.CourseListCreateView.as_view(), name="course-list"),
    path("mine/", views.MyCoursesView.as_view(), name="course-mine"),
    path("pending/", views.PendingCoursesView.as_view(), name="course-pending"),
    path("<uuid:course_id>/", views.CourseDetailView.as_view(), name="course-detail"),
    path("<uuid:course_id>/approve/", views.CourseApproveView.as_view(), name="course-approve"),
    path("<uuid:course_id>/decline/", views.CourseDeclineView.as_view(), name="course-decline"),
]
