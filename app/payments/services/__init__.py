"""
Payment services for coordinating escrow operations.

This module provides:
- EscrowService: Purchase initiation, admin and instructor review,
  refunds, history listing and archiving

Usage:
    from payments.services import EscrowService

    tx = EscrowService.initiate_purchase(caller, course_id, "bank-secret")
    EscrowService.admin_approve(admin_caller, tx.id)
"""

from payments.services.escrow_service import (
    EscrowService,
    calculate_revenue_split,
)

__all__ = [
    "EscrowService",
    "calculate_revenue_split",
]
