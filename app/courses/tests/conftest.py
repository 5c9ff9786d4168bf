"""
Pytest fixtures for course tests.

Role users, callers and API clients come from app/conftest.py.
"""

import pytest

from courses.tests.factories import (
    ApprovedCourseFactory,
    CourseFactory,
    class_payload,
)
from payments.ledger.services import LedgerService


@pytest.fixture
def valid_classes():
    return [class_payload(), class_payload(title="Second", quiz=[])]


@pytest.fixture
def pending_course(instructor):
    return CourseFactory(instructor=instructor, price=1000)


@pytest.fixture
def approved_course(instructor):
    return ApprovedCourseFactory(instructor=instructor, price=1000)


@pytest.fixture
def instructor_account(instructor):
    """Instructor's bank account (opening bonus 5000)."""
    return LedgerService.open_account(instructor.id, "INS-0001", "teach")


@pytest.fixture
def operator_secret(settings):
    settings.COURSE_APPROVAL_PASSPHRASE = "operator-pass"
    return "operator-pass"
