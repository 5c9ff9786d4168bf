"""
Pytest fixtures for ledger tests.

Sections:
    - Account Fixtures: Bank accounts opened through LedgerService
    - System Account Fixtures: Platform escrow, revenue and treasury
"""

import uuid

import pytest

from payments.ledger.models import AccountType
from payments.ledger.services import LedgerService


# ==========================================================================
# Account Fixtures
# ==========================================================================


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest.fixture
def opened_account(db, owner_id):
    """Bank account opened with the default opening bonus (5000) and secret 's3cret'."""
    return LedgerService.open_account(owner_id, "ACC-1001", "s3cret")


# ==========================================================================
# System Account Fixtures
# ==========================================================================


@pytest.fixture
def escrow_account(db):
    return LedgerService.get_system_account(AccountType.PLATFORM_ESCROW)


@pytest.fixture
def revenue_account(db):
    return LedgerService.get_system_account(AccountType.PLATFORM_REVENUE)


@pytest.fixture
def treasury_account(db):
    return LedgerService.get_system_account(AccountType.PLATFORM_TREASURY)
