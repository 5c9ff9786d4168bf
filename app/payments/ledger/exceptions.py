"""
Ledger-specific exceptions for bank operations.

Each exception also derives from the core category it belongs to, so the
API layer maps it to the right HTTP status.

Exception Hierarchy:
    LedgerError (base)
    ├── NoAccount - Owner has no bank account (404)
    ├── DuplicateAccount - Owner or account number already taken (409)
    ├── InvalidSecret - Secret mismatch on debit or course approval (403)
    ├── InsufficientFunds - Balance below the debit amount (400)
    └── InactiveAccount - Account deactivated (409)

Usage:
    from payments.ledger.exceptions import InsufficientFunds, NoAccount

    if balance < amount:
        raise InsufficientFunds(account.id, required=amount, available=balance)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)

if TYPE_CHECKING:
    import uuid
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base exception for all ledger operations.

    Example:
        try:
            LedgerService.debit(owner_id, 900, secret, ...)
        except LedgerError as e:
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "LEDGER_ERROR"


class NoAccount(LedgerError, NotFoundError):
    """
    Raised when an owner (or account id) has no ledger account.

    Example:
        raise NoAccount(
            "No bank account for this user",
            details={"owner_id": str(owner_id)},
        )
    """

    default_error_code: str = "NO_ACCOUNT"


class DuplicateAccount(LedgerError, ConflictError):
    """Raised when the owner already has an account or the number is taken."""

    default_error_code: str = "DUPLICATE_ACCOUNT"


class InvalidSecret(LedgerError, PermissionDeniedError):
    """
    Raised when a provided secret does not match.

    Covers both the account secret on debits and the operator secret
    checked by the course approval gate.
    """

    default_error_code: str = "INVALID_SECRET"


class InsufficientFunds(LedgerError):
    """
    Raised when an account has insufficient funds for a debit.

    Attributes:
        account_id: The UUID of the account with insufficient funds
        required: The amount that was required
        available: The amount that was available
    """

    default_error_code: str = "INSUFFICIENT_FUNDS"
    status_code: int = 400

    def __init__(
        self,
        account_id: uuid.UUID,
        required: int,
        available: int,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.account_id = account_id
        self.required = required
        self.available = available

        message = f"Insufficient funds: required {required}, available {available}"

        full_details = {
            "account_id": str(account_id),
            "required": required,
            "available": available,
        }
        if details:
            full_details.update(details)

        super().__init__(
            message=message,
            error_code=error_code,
            details=full_details,
        )


class InactiveAccount(LedgerError, ConflictError):
    """
    Raised when attempting to use an inactive account.

    Accounts can be deactivated but their history is preserved.
    """

    default_error_code: str = "INACTIVE_ACCOUNT"
