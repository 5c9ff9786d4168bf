"""
API views for courses.

Provides:
- CourseListCreateView: Learner catalog (GET) and course submission (POST)
- MyCoursesView: Instructor's own courses
- PendingCoursesView: Admin review queue
- CourseDetailView: Read, update (re-submits for review) and delete
- CourseApproveView / CourseDeclineView: Course approval gate

Errors raised by the service layer (BaseApplicationError subclasses) are
rendered by core.exception_handler.api_exception_handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.context import resolve_caller
from authentication.permissions import IsInstructor, IsLmsAdmin
from courses.serializers import (
    CourseApproveSerializer,
    CourseDeclineSerializer,
    CourseDetailSerializer,
    CourseSummarySerializer,
    CourseWriteSerializer,
)
from courses.services import CourseApprovalGate, CourseService


def _course_payload(validated: dict) -> dict:
    return {
        "title": validated["title"],
        "description": validated.get("description", ""),
        "thumbnail_url": validated.get("thumbnail_url", ""),
        "price": validated["price"],
        "classes": validated["classes"],
    }


class CourseListCreateView(APIView):
    """
    GET  /api/v1/courses/   - Approved courses (any authenticated user)
    POST /api/v1/courses/   - Submit a new course (instructor)
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsInstructor()]
        return [IsAuthenticated()]

    @extend_schema(
        summary="List approved courses",
        responses=CourseSummarySerializer(many=True),
        tags=["Courses"],
    )
    def get(self, request):
        courses = CourseService.list_available()
        return Response(CourseSummarySerializer(courses, many=True).data)

    @extend_schema(
        summary="Submit a course for review",
        request=CourseWriteSerializer,
        responses={
            201: CourseDetailSerializer,
            400: OpenApiResponse(description="Invalid course content"),
        },
        tags=["Courses"],
    )
    def post(self, request):
        serializer = CourseWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        course = CourseService.create_course(
            resolve_caller(request.user),
            **_course_payload(serializer.validated_data),
        )
        return Response(CourseDetailSerializer(course).data, status=status.HTTP_201_CREATED)


class MyCoursesView(APIView):
    """GET /api/v1/courses/mine/ - Instructor's own courses, any status."""

    permission_classes = [IsInstructor]

    @extend_schema(responses=CourseDetailSerializer(many=True), tags=["Courses"])
    def get(self, request):
        courses = CourseService.list_for_instructor(resolve_caller(request.user))
        return Response(CourseDetailSerializer(courses, many=True).data)


class PendingCoursesView(APIView):
    """GET /api/v1/courses/pending/ - Courses awaiting admin review."""

    permission_classes = [IsLmsAdmin]

    @extend_schema(responses=CourseDetailSerializer(many=True), tags=["Courses - Review"])
    def get(self, request):
        courses = CourseApprovalGate.list_pending(resolve_caller(request.user))
        return Response(CourseDetailSerializer(courses, many=True).data)


class CourseDetailView(APIView):
    """
    GET    /api/v1/courses/{id}/ - Course detail
    PUT    /api/v1/courses/{id}/ - Replace content (owner); re-submits for review
    DELETE /api/v1/courses/{id}/ - Delete (owner or admin)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses=CourseDetailSerializer, tags=["Courses"])
    def get(self, request, course_id):
        course = CourseService.get_course_for_caller(resolve_caller(request.user), course_id)
        return Response(CourseDetailSerializer(course).data)

    @extend_schema(
        request=CourseWriteSerializer,
        responses={
            200: CourseDetailSerializer,
            403: OpenApiResponse(description="Not the course owner"),
            404: OpenApiResponse(description="Course not found"),
            409: OpenApiResponse(description="Stale version"),
        },
        tags=["Courses"],
    )
    def put(self, request, course_id):
        serializer = CourseWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        course = CourseService.update_course(
            resolve_caller(request.user),
            course_id,
            expected_version=serializer.validated_data.get("version"),
            **_course_payload(serializer.validated_data),
        )
        return Response(CourseDetailSerializer(course).data)

    @extend_schema(responses={204: None}, tags=["Courses"])
    def delete(self, request, course_id):
        CourseService.delete_course(resolve_caller(request.user), course_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CourseApproveView(APIView):
    """
    POST /api/v1/courses/{id}/approve/

    Request:
        {"operator_secret": "..."}

    Response:
        200 OK: Approved course (incentive paid on first approval)
        403 Forbidden: Not an admin, or wrong operator secret
        404 Not Found: Unknown course, or instructor has no bank account
        409 Conflict: Course is not pending
    """

    permission_classes = [IsLmsAdmin]

    @extend_schema(
        request=CourseApproveSerializer,
        responses={
            200: CourseDetailSerializer,
            403: OpenApiResponse(description="Invalid operator secret"),
            404: OpenApiResponse(description="Course or instructor bank account not found"),
            409: OpenApiResponse(description="Course is not pending"),
        },
        tags=["Courses - Review"],
    )
    def post(self, request, course_id):
        serializer = CourseApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        course = CourseApprovalGate.approve(
            resolve_caller(request.user),
            course_id,
            serializer.validated_data["operator_secret"],
        )
        return Response(CourseDetailSerializer(course).data)


class CourseDeclineView(APIView):
    """POST /api/v1/courses/{id}/decline/ - Decline a pending course."""

    permission_classes = [IsLmsAdmin]

    @extend_schema(
        request=CourseDeclineSerializer,
        responses={200: CourseDetailSerializer},
        tags=["Courses - Review"],
    )
    def post(self, request, course_id):
        serializer = CourseDeclineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        course = CourseApprovalGate.decline(
            resolve_caller(request.user),
            course_id,
            serializer.validated_data["reason"],
        )
        return Response(CourseDetailSerializer(course).data)
