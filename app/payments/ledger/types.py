"""
Data types for ledger operations.

Types:
    RecordEntryParams: Parameters for recording a ledger entry
    AccountSummary: Read-only view of a user's bank account

Usage:
    from payments.ledger.types import RecordEntryParams

    params = RecordEntryParams(
        debit_account_id=escrow.id,
        credit_account_id=learner_bank.id,
        amount=900,
        entry_type=EntryType.REFUND,
        idempotency_key=f"escrow:{tx.id}:refund",
    )
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RecordEntryParams:
    """
    Parameters for recording a ledger entry.

    Required Attributes:
        debit_account_id: UUID of the account being debited (money out)
        credit_account_id: UUID of the account being credited (money in)
        amount: Amount in whole units (must be positive)
        entry_type: Type of entry (EntryType value)
        idempotency_key: Unique key to prevent duplicate entries

    Optional Attributes:
        reference_id: UUID of related business entity
        reference_type: Type of related entity
        description: Human-readable description
        metadata: Arbitrary JSON-serializable data
        created_by: Identifier of the caller creating the entry
    """

    # Required fields
    debit_account_id: uuid.UUID
    credit_account_id: uuid.UUID
    amount: int
    entry_type: str
    idempotency_key: str

    # Optional fields
    reference_id: uuid.UUID | None = None
    reference_type: str | None = None
    description: str | None = None
    metadata: dict[str, Any] | None = field(default_factory=dict)
    created_by: str | None = None

    def __post_init__(self) -> None:
        """Validate params after initialization."""
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise ValueError("amount must be an integer")
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if not self.idempotency_key:
            raise ValueError("idempotency_key is required")
        if self.debit_account_id == self.credit_account_id:
            raise ValueError("debit_account_id and credit_account_id must be different")


@dataclass(frozen=True)
class AccountSummary:
    """Balance and identifiers of a user's bank account."""

    owner_id: uuid.UUID
    account_number: str
    balance: int
