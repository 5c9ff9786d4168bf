"""
Test configuration and fixtures for authentication tests.

Role users, callers and API clients come from app/conftest.py.
"""

import pytest

from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a basic active learner with a known password."""
    return UserFactory(email="known@example.com", password="TestPass123!")


@pytest.fixture
def inactive_user(db):
    return UserFactory(is_active=False)
