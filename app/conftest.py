"""
Shared pytest configuration for all apps.

Provides:
- Test-speed settings (no throttling, fast password hasher)
- Auto-marking of tests as unit / integration / e2e by filename
- Role users, caller contexts and API clients used across apps
"""

import pytest
from rest_framework.test import APIClient


def pytest_configure():
    """Configure Django settings before tests run."""
    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    # Also hashes bank account secrets
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full purchase / review workflows)
    - test_views.py, test_services.py, test_commands.py, etc. → integration
    - test_models.py, test_serializers.py, test_validators.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    # Filename patterns for each category
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_commands.py",
        "test_approval_gate.py",
        "test_escrow_service.py",
        "test_concurrency.py",
        "test_optimistic_locking.py",
        "test_exception_handler.py",
        "test_health.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_validators.py",
        "test_managers.py",
        "test_context.py",
        "test_capabilities.py",
        "test_state_transitions.py",
        "test_locks.py",
        "test_exceptions.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        # Check patterns in priority order
        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Users and callers
# =============================================================================


@pytest.fixture
def learner(db):
    from authentication.tests.factories import LearnerFactory

    return LearnerFactory()


@pytest.fixture
def instructor(db):
    from authentication.tests.factories import InstructorFactory

    return InstructorFactory()


@pytest.fixture
def lms_admin(db):
    from authentication.tests.factories import AdminFactory

    return AdminFactory()


@pytest.fixture
def learner_caller(learner):
    from authentication.context import CallerContext

    return CallerContext(id=learner.id, role=learner.role)


@pytest.fixture
def instructor_caller(instructor):
    from authentication.context import CallerContext

    return CallerContext(id=instructor.id, role=instructor.role)


@pytest.fixture
def admin_caller(lms_admin):
    from authentication.context import CallerContext

    return CallerContext(id=lms_admin.id, role=lms_admin.role)


# =============================================================================
# API clients
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def learner_client(learner):
    client = APIClient()
    client.force_authenticate(user=learner)
    return client


@pytest.fixture
def instructor_client(instructor):
    client = APIClient()
    client.force_authenticate(user=instructor)
    return client


@pytest.fixture
def admin_client_api(lms_admin):
    client = APIClient()
    client.force_authenticate(user=lms_admin)
    return client
