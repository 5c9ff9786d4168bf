"""
Ledger - Double-entry bookkeeping for the simulated bank.

Public API:
    Models:
        LedgerAccount - User bank accounts and platform accounts
        LedgerEntry - Immutable movements between accounts
        AccountType - Enum of account categories
        EntryType - Enum of movement types

    Service:
        LedgerService - open_account, get_balance, debit, credit, record_entries

    Types:
        RecordEntryParams - Parameters for recording entries
        AccountSummary - Account number and balance of a user

    Exceptions:
        LedgerError, NoAccount, DuplicateAccount, InvalidSecret,
        InsufficientFunds, InactiveAccount

Usage:
    from payments.ledger import LedgerService, InsufficientFunds

    try:
        LedgerService.debit(learner.id, 900, secret, entry_type=..., idempotency_key=...)
    except InsufficientFunds as e:
        print(f"Need {e.required}, have {e.available}")
"""

from .exceptions import (
    DuplicateAccount,
    InactiveAccount,
    InsufficientFunds,
    InvalidSecret,
    LedgerError,
    NoAccount,
)
from .models import AccountType, EntryType, LedgerAccount, LedgerEntry
from .services import LedgerService
from .types import AccountSummary, RecordEntryParams

__all__ = [
    # Models
    "LedgerAccount",
    "LedgerEntry",
    "AccountType",
    "EntryType",
    # Service
    "LedgerService",
    # Types
    "AccountSummary",
    "RecordEntryParams",
    # Exceptions
    "LedgerError",
    "NoAccount",
    "DuplicateAccount",
    "InvalidSecret",
    "InsufficientFunds",
    "InactiveAccount",
]
