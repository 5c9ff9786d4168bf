"""
Course services.

This module provides:
- CourseService: Authoring (create / update / delete) and catalog reads,
  including the purchase snapshot consumed by the escrow engine
- CourseApprovalGate: Admin review of pending courses. Approval requires
  an operator capability and pays the one-time instructor incentive from
  the platform treasury in the same database transaction.

Usage:
    from courses.services import CourseApprovalGate, CourseService

    course = CourseService.create_course(
        instructor_caller,
        title="Intro to Escrow",
        price=900,
        classes=[{"video_url": "https://cdn.example.com/1.mp4", "quiz": []}],
    )
    CourseApprovalGate.approve(admin_caller, course.id, operator_secret="...")
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from authentication.models import UserRole
from core.exceptions import PermissionDeniedError
from core.services import BaseService
from courses.capabilities import get_operator_capability
from courses.exceptions import CourseNotFound
from courses.models import Course, CourseClass
from courses.states import CourseStatus
from courses.types import CourseSnapshot
from courses.validators import validate_course_content
from payments.exceptions import InvalidStateTransitionError
from payments.ledger.models import AccountType, EntryType
from payments.ledger.services import LedgerService
from payments.locks import check_version

if TYPE_CHECKING:
    from typing import Any

    from authentication.context import CallerContext
    from courses.capabilities import OperatorCapability

logger = logging.getLogger(__name__)


def _lock_course(course_id: uuid.UUID, expected_version: int | None = None) -> Course:
    """Lock a course row for the rest of the current transaction."""
    if expected_version is not None:
        return check_version(Course, course_id, expected_version, not_found_error=CourseNotFound)
    try:
        return Course.objects.select_for_update().get(id=course_id)
    except Course.DoesNotExist:
        raise CourseNotFound(
            f"Course {course_id} not found",
            details={"course_id": str(course_id)},
        )


class CourseService(BaseService):
    """
    Authoring and catalog operations.

    Every write validates content with validate_course_content() and
    replaces the class list as a whole.
    """

    @classmethod
    def create_course(
        cls,
        caller: CallerContext,
        *,
        title: str,
        price: int,
        classes: list[dict[str, Any]],
        description: str = "",
        thumbnail_url: str = "",
    ) -> Course:
        """
        Create a course in PENDING status.

        Raises:
            PermissionDeniedError: If the caller is not an instructor
            ValidationError: If the content is invalid
        """
        caller.require_role(UserRole.INSTRUCTOR)
        validate_course_content(title=title, price=price, classes=classes)

        with cls.atomic():
            course = Course.objects.create(
                instructor_id=caller.id,
                title=title.strip(),
                description=description or "",
                thumbnail_url=thumbnail_url or "",
                price=price,
            )
            cls._replace_classes(course, classes)

        logger.info(
            "Course created",
            extra={"course_id": str(course.id), "instructor_id": str(caller.id), "price": price},
        )
        return course

    @classmethod
    def update_course(
        cls,
        caller: CallerContext,
        course_id: uuid.UUID,
        *,
        title: str,
        price: int,
        classes: list[dict[str, Any]],
        description: str = "",
        thumbnail_url: str = "",
        expected_version: int | None = None,
    ) -> Course:
        """
        Replace a course's content. Approved or declined courses return to
        PENDING and leave the catalog until re-approved.

        Raises:
            CourseNotFound: If the course doesn't exist
            PermissionDeniedError: If the caller is not the course owner
            ValidationError: If the content is invalid
            StaleRecordError: If expected_version is given and outdated
        """
        caller.require_role(UserRole.INSTRUCTOR)
        validate_course_content(title=title, price=price, classes=classes)

        with cls.atomic():
            course = _lock_course(course_id, expected_version)
            cls._require_owner(caller, course)

            previous_status = course.status
            course.title = title.strip()
            course.description = description or ""
            course.thumbnail_url = thumbnail_url or ""
            course.price = price
            if course.status != CourseStatus.PENDING:
                course.resubmit()
            course.save()
            cls._replace_classes(course, classes)

        logger.info(
            "Course updated",
            extra={
                "course_id": str(course.id),
                "previous_status": previous_status,
                "status": course.status,
            },
        )
        return course

    @classmethod
    def delete_course(cls, caller: CallerContext, course_id: uuid.UUID) -> None:
        """
        Delete a course. Allowed for the owner and for admins.

        Escrow transactions keep their title, price and instructor
        snapshot; their course reference becomes NULL.
        """
        caller.require_role(UserRole.INSTRUCTOR, UserRole.ADMIN)

        with cls.atomic():
            course = _lock_course(course_id)
            if not caller.is_admin:
                cls._require_owner(caller, course)
            course.delete()

        logger.info(
            "Course deleted",
            extra={"course_id": str(course_id), "caller_id": str(caller.id), "role": caller.role},
        )

    @staticmethod
    def get_course(course_id: uuid.UUID) -> Course:
        try:
            return Course.objects.select_related("instructor").get(id=course_id)
        except Course.DoesNotExist:
            raise CourseNotFound(
                f"Course {course_id} not found",
                details={"course_id": str(course_id)},
            )

    @staticmethod
    def get_course_for_caller(caller: CallerContext, course_id: uuid.UUID) -> Course:
        """
        Get a course the caller may see.

        Approved courses are public; others are visible to their owner and
        to admins only (anyone else gets CourseNotFound).
        """
        course = CourseService.get_course(course_id)
        if course.status == CourseStatus.APPROVED or caller.is_admin:
            return course
        if caller.is_instructor and course.instructor_id == caller.id:
            return course
        raise CourseNotFound(
            f"Course {course_id} not found",
            details={"course_id": str(course_id)},
        )

    @staticmethod
    def list_available() -> QuerySet[Course]:
        """Approved courses, newest first (learner catalog)."""
        return (
            Course.objects.filter(status=CourseStatus.APPROVED)
            .select_related("instructor")
            .order_by("-created_at")
        )

    @staticmethod
    def list_for_instructor(caller: CallerContext) -> QuerySet[Course]:
        caller.require_role(UserRole.INSTRUCTOR)
        return (
            Course.objects.filter(instructor_id=caller.id)
            .prefetch_related("classes")
            .order_by("-created_at")
        )

    @staticmethod
    def get_purchase_snapshot(course_id: uuid.UUID, *, for_update: bool = False) -> CourseSnapshot:
        """
        Read price, status, instructor and title of a course.

        With for_update=True the course row stays locked until the
        surrounding transaction ends, so the status cannot change between
        this read and the learner's debit.

        Raises:
            CourseNotFound: If the course doesn't exist
        """
        queryset = Course.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            course = queryset.get(id=course_id)
        except Course.DoesNotExist:
            raise CourseNotFound(
                f"Course {course_id} not found",
                details={"course_id": str(course_id)},
            )
        return CourseSnapshot(
            course_id=course.id,
            title=course.title,
            price=course.price,
            instructor_id=course.instructor_id,
            status=course.status,
        )

    @staticmethod
    def _require_owner(caller: CallerContext, course: Course) -> None:
        if course.instructor_id != caller.id:
            raise PermissionDeniedError(
                "Only the course owner can change this course",
                error_code="NOT_COURSE_OWNER",
                details={"course_id": str(course.id)},
            )

    @staticmethod
    def _replace_classes(course: Course, classes: list[dict[str, Any]]) -> None:
        course.classes.all().delete()
        CourseClass.objects.bulk_create(
            [
                CourseClass(
                    course=course,
                    position=position,
                    title=item.get("title") or "",
                    video_url=item["video_url"],
                    audio_url=item.get("audio_url") or "",
                    text=item.get("text") or "",
                    quiz=item.get("quiz") or [],
                )
                for position, item in enumerate(classes)
            ]
        )


class CourseApprovalGate(BaseService):
    """
    Admin review of pending courses.

    approve() and decline() only act on PENDING courses; anything else is
    an InvalidStateTransitionError and nothing is written.
    """

    @classmethod
    def list_pending(cls, caller: CallerContext) -> QuerySet[Course]:
        """Pending courses, oldest first (review queue)."""
        caller.require_role(UserRole.ADMIN)
        return (
            Course.objects.filter(status=CourseStatus.PENDING)
            .select_related("instructor")
            .prefetch_related("classes")
            .order_by("created_at")
        )

    @classmethod
    def approve(
        cls,
        caller: CallerContext,
        course_id: uuid.UUID,
        operator_secret: str | None,
        capability: OperatorCapability | None = None,
    ) -> Course:
        """
        Approve a pending course and pay the approval incentive.

        The incentive (settings.COURSE_APPROVAL_INCENTIVE) moves from the
        platform treasury to the instructor's bank account only on the
        first approval of a course. The status change and the credit
        commit together or not at all.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            InvalidSecret: If the operator secret is wrong
            CourseNotFound: If the course doesn't exist
            InvalidStateTransitionError: If the course is not pending
            NoAccount: If the instructor has no bank account (course stays pending)
        """
        capability = capability or get_operator_capability()
        capability.verify(caller, operator_secret)

        incentive = settings.COURSE_APPROVAL_INCENTIVE

        with cls.atomic():
            course = _lock_course(course_id)
            cls._require_pending(course, "approve")

            course.approve()
            paid = 0
            if course.incentive_paid_at is None and incentive > 0:
                LedgerService.credit(
                    course.instructor_id,
                    incentive,
                    entry_type=EntryType.APPROVAL_INCENTIVE,
                    idempotency_key=f"course:{course.id}:approval_incentive",
                    source=AccountType.PLATFORM_TREASURY,
                    reference_type="course",
                    reference_id=course.id,
                    description=f"Approval incentive for {course.title}",
                    created_by=str(caller.id) if caller.id else "operator",
                )
                course.incentive_paid_at = timezone.now()
                paid = incentive
            course.save()

        logger.info(
            "Course approved",
            extra={
                "course_id": str(course.id),
                "instructor_id": str(course.instructor_id),
                "incentive_paid": paid,
            },
        )
        return course

    @classmethod
    def decline(cls, caller: CallerContext, course_id: uuid.UUID, reason: str = "") -> Course:
        """
        Decline a pending course. No money moves.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            CourseNotFound: If the course doesn't exist
            InvalidStateTransitionError: If the course is not pending
        """
        caller.require_role(UserRole.ADMIN)

        with cls.atomic():
            course = _lock_course(course_id)
            cls._require_pending(course, "decline")
            course.decline(reason=reason or "")
            course.save()

        logger.info(
            "Course declined",
            extra={"course_id": str(course.id), "reason": reason},
        )
        return course

    @staticmethod
    def _require_pending(course: Course, action: str) -> None:
        if course.status != CourseStatus.PENDING:
            logger.warning(
                f"Rejected course {action}: course is not pending",
                extra={"course_id": str(course.id), "current_status": course.status},
            )
            raise InvalidStateTransitionError(
                f"Cannot {action} course in '{course.status}' status",
                details={
                    "course_id": str(course.id),
                    "current_state": course.status,
                    "expected_state": CourseStatus.PENDING,
                    "action": action,
                },
            )
