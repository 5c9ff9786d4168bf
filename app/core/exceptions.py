"""
Base exception classes for application-wide error handling.

Every domain error in the LMS escrow backend derives from
BaseApplicationError, so views and the DRF exception handler can render
any of them the same way.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── PermissionDeniedError - Caller not allowed to act (403)
    ├── NotFoundError - Resource not found (404)
    ├── ConflictError - State conflicts, duplicates, stale writes (409)
    └── PersistenceError - Storage layer failed mid-operation (500)

Usage:
    from core.exceptions import ValidationError, NotFoundError

    raise ValidationError("Price must be positive", error_code="INVALID_PRICE")

    raise NotFoundError(
        "Course not found",
        error_code="COURSE_NOT_FOUND",
        details={"course_id": str(course_id)},
    )

Note:
    Domain apps subclass these categories (e.g. payments.ledger.exceptions)
    so the HTTP status travels with the exception class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, amounts)
        status_code: HTTP status used when rendered by the API layer

    Example:
        try:
            LedgerService.get_balance(owner_id)
        except NotFoundError as e:
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Insufficient funds",
                "error_code": "INSUFFICIENT_FUNDS",
                "details": {"required": 900, "available": 400}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Non-positive amounts or prices
    - Malformed quiz questions (answer not among options)
    - Missing required fields (video URL, account number, secret)

    Example:
        raise ValidationError(
            "Course validation failed",
            details={"classes": {"0": ["video_url is required"]}},
        )

    Note:
        DRF serializers validate request shape; raise this from the
        service layer for business rules.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        course = Course.objects.filter(id=course_id).first()
        if not course:
            raise NotFoundError(
                f"Course {course_id} not found",
                error_code="COURSE_NOT_FOUND",
                details={"course_id": str(course_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller lacks permission for an operation.

    Use for:
    - Role mismatch (a learner trying to approve a course)
    - Acting on another instructor's transaction
    - Failed operator or account secret checks (see InvalidSecret)

    Note:
        For authentication failures (missing/invalid token), DRF's
        NotAuthenticated / AuthenticationFailed still apply.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries (account number already taken)
    - Invalid state transitions (resolving a transaction twice)
    - Optimistic locking failures

    Example:
        if transaction.state != expected:
            raise ConflictError(
                f"Cannot {action} transaction in {transaction.state} state",
                error_code="INVALID_STATE_TRANSITION",
                details={"current_state": transaction.state, "action": action},
            )
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class PersistenceError(BaseApplicationError):
    """
    Raised when the storage layer fails during an operation.

    Wraps django.db.DatabaseError at the API boundary. Because every
    money-moving operation runs in a single database transaction, the
    ledger is unchanged when this is raised.
    """

    default_error_code: str = "PERSISTENCE_FAILURE"
    status_code: int = 500
