"""
Payment domain models.

This module contains all escrow-related models:
- EscrowTransaction: One learner purchase held in escrow until resolved
- EscrowTransitionLog: Audit trail of transaction state changes

Ledger models live in payments.ledger.models and are imported here so
Django registers them with the payments app.
"""

from payments.ledger.models import LedgerAccount, LedgerEntry
from payments.models.escrow_transaction import EscrowTransaction, EscrowTransitionLog

__all__ = [
    "EscrowTransaction",
    "EscrowTransitionLog",
    "LedgerAccount",
    "LedgerEntry",
]
