"""
Tests for CallerContext and resolve_caller().

Services trust only the caller they are handed, so role checks here are
the last line of defence behind the DRF permissions.
"""

import uuid

import pytest
from django.contrib.auth.models import AnonymousUser

from authentication.context import CallerContext, resolve_caller
from authentication.models import UserRole
from core.exceptions import PermissionDeniedError


class TestCallerContext:
    def test_role_properties(self):
        caller = CallerContext(id=uuid.uuid4(), role=UserRole.INSTRUCTOR)

        assert caller.is_instructor is True
        assert caller.is_learner is False
        assert caller.is_admin is False

    def test_system_caller_is_admin_without_id(self):
        operator = CallerContext.system()

        assert operator.id is None
        assert operator.is_admin is True

    def test_require_role_passes_for_matching_role(self):
        caller = CallerContext(id=uuid.uuid4(), role=UserRole.LEARNER)

        caller.require_role(UserRole.LEARNER, UserRole.ADMIN)

    def test_require_role_raises_for_other_role(self):
        """
        Given a learner caller
        When an admin-only operation checks the role
        Then PermissionDeniedError with ROLE_REQUIRED is raised
        """
        caller = CallerContext(id=uuid.uuid4(), role=UserRole.LEARNER)

        with pytest.raises(PermissionDeniedError) as exc_info:
            caller.require_role(UserRole.ADMIN)

        assert exc_info.value.error_code == "ROLE_REQUIRED"
        assert exc_info.value.details["caller_role"] == UserRole.LEARNER

    def test_is_immutable(self):
        caller = CallerContext(id=uuid.uuid4(), role=UserRole.LEARNER)

        with pytest.raises(AttributeError):
            caller.role = UserRole.ADMIN


class TestResolveCaller:
    def test_builds_context_from_user(self, instructor):
        caller = resolve_caller(instructor)

        assert caller == CallerContext(id=instructor.id, role=UserRole.INSTRUCTOR)

    def test_rejects_anonymous_user(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            resolve_caller(AnonymousUser())

        assert exc_info.value.error_code == "NOT_AUTHENTICATED"

    def test_rejects_inactive_user(self, inactive_user):
        with pytest.raises(PermissionDeniedError):
            resolve_caller(inactive_user)
