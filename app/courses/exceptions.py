"""
Course-specific exceptions.

Exception Hierarchy:
    CourseError (base)
    ├── CourseNotFound - Course lookup failures (404)
    └── CourseNotApproved - Purchase of a course that is not approved (409)

Operator secret failures raise payments.ledger.exceptions.InvalidSecret and
approving a non-pending course raises
payments.exceptions.InvalidStateTransitionError.
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError


class CourseError(BaseApplicationError):
    """Base exception for course operations."""

    default_error_code: str = "COURSE_ERROR"


class CourseNotFound(CourseError, NotFoundError):
    """
    Raised when a course cannot be found.

    Example:
        raise CourseNotFound(
            f"Course {course_id} not found",
            details={"course_id": str(course_id)},
        )
    """

    default_error_code: str = "COURSE_NOT_FOUND"


class CourseNotApproved(CourseError, ConflictError):
    """Raised when a learner tries to buy a course that is not approved."""

    default_error_code: str = "COURSE_NOT_APPROVED"
