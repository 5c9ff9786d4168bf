"""
Payments app for the LMS bank simulation and course purchase escrow.

This app handles:
- Bank account setup and balances (payments.ledger)
- Course purchases held in escrow until admin and instructor review
- Payouts, platform revenue and refunds as ledger entries

Related apps:
    - authentication: User model and CallerContext
    - courses: Purchase snapshots (price, status, instructor)

Usage:
    from payments.services import EscrowService

    tx = EscrowService.initiate_purchase(caller, course_id, secret)
    EscrowService.admin_approve(admin_caller, tx.id)
    EscrowService.instructor_accept(instructor_caller, tx.id)
"""
