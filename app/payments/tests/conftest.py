"""
Pytest fixtures for escrow tests.

Sections:
    - Bank Account Fixtures: Accounts opened through LedgerService
    - Course Fixtures: An approved course priced 1000
    - Transaction Fixtures: Purchases at each review stage, created
      through EscrowService so the ledger matches

Role users, callers and API clients come from app/conftest.py.

Usage:
    def test_accept(instructor_caller, forwarded_purchase):
        EscrowService.instructor_accept(instructor_caller, forwarded_purchase.id)
"""

import pytest

from courses.tests.factories import ApprovedCourseFactory
from payments.ledger.services import LedgerService
from payments.services import EscrowService

LEARNER_SECRET = "learn-pass"


# =============================================================================
# Bank Account Fixtures
# =============================================================================


@pytest.fixture
def learner_account(learner, settings):
    """Learner's bank account with balance 5000."""
    settings.LEDGER_OPENING_BONUS = 5000
    return LedgerService.open_account(learner.id, "LRN-0001", LEARNER_SECRET)


@pytest.fixture
def instructor_account(instructor, settings):
    """Instructor's bank account with balance 0."""
    settings.LEDGER_OPENING_BONUS = 0
    account = LedgerService.open_account(instructor.id, "INS-0001", "teach")
    settings.LEDGER_OPENING_BONUS = 5000
    return account


# =============================================================================
# Course Fixtures
# =============================================================================


@pytest.fixture
def course(instructor):
    return ApprovedCourseFactory(instructor=instructor, price=1000)


# =============================================================================
# Transaction Fixtures
# =============================================================================


@pytest.fixture
def purchase(learner_caller, learner_account, instructor_account, course):
    """Transaction in pending_admin; 1000 held in escrow."""
    return EscrowService.initiate_purchase(learner_caller, course.id, LEARNER_SECRET)


@pytest.fixture
def forwarded_purchase(admin_caller, purchase):
    """Transaction in pending_instructor."""
    return EscrowService.admin_approve(admin_caller, purchase.id)
