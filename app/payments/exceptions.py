"""
Escrow-specific exceptions for purchase transactions.

Exception Hierarchy:
    EscrowError (base for the escrow domain)
    └── TransactionNotFoundError - Escrow transaction lookup failures (404)

    StaleRecordError - Optimistic locking conflict (inherits ConflictError)
    InvalidStateTransitionError - Transition not allowed from the current
        state (inherits ConflictError); also raised by the course approval gate
    DuplicatePurchaseError - Learner already holds a live purchase of the
        course (inherits ConflictError)

Usage:
    from payments.exceptions import InvalidStateTransitionError

    raise InvalidStateTransitionError(
        "Cannot admin_approve transaction in 'completed' state",
        details={"current_state": "completed", "expected_state": "pending_admin"},
    )
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError


# =============================================================================
# Escrow Domain Exceptions
# =============================================================================


class EscrowError(BaseApplicationError):
    """
    Base exception for escrow transaction operations.

    Example:
        try:
            EscrowService.instructor_accept(caller, tx_id)
        except EscrowError as e:
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "ESCROW_ERROR"


class TransactionNotFoundError(EscrowError, NotFoundError):
    """
    Raised when an escrow transaction cannot be found.

    Also raised when an instructor or learner asks for a transaction they
    are not a party to, so ids of other users' purchases are not confirmed.
    """

    default_error_code: str = "TRANSACTION_NOT_FOUND"


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class StaleRecordError(ConflictError):
    """
    Raised when optimistic locking detects concurrent modification.

    The record was modified by another request between the caller's read
    and this update. The caller should reload and retry, or abort.

    Attributes:
        details: Contains pk, expected_version, and current_version
    """

    default_error_code: str = "STALE_RECORD"


class InvalidStateTransitionError(ConflictError):
    """
    Raised when a state machine transition is not allowed.

    Wraps django-fsm's TransitionNotAllowed and explicit state checks
    made under a row lock. Nothing has been written when this is raised.

    Attributes:
        details: Contains current_state, expected_state and the action name
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"


class DuplicatePurchaseError(ConflictError):
    """Raised when a learner already has a live purchase of the course."""

    default_error_code: str = "DUPLICATE_PURCHASE"


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "EscrowError",
    "TransactionNotFoundError",
    "StaleRecordError",
    "InvalidStateTransitionError",
    "DuplicatePurchaseError",
]
