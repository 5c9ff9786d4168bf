"""
Role permission classes for the LMS API.

- IsLearner: caller's role is learner
- IsInstructor: caller's role is instructor
- IsLmsAdmin: caller's role is lms_admin

Design Decisions:
    - These gate views only. Services re-check the role through
      CallerContext.require_role, so a misconfigured view cannot let a
      learner resolve a transaction.
    - Ownership (an instructor acting on their own transaction) is
      checked in the service layer, where the row is locked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from authentication.models import UserRole

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class _HasRole(permissions.BasePermission):
    role: str = ""

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.role == self.role)


class IsLearner(_HasRole):
    """Allows access only to learners."""

    message = "Only learners can perform this action."
    role = UserRole.LEARNER


class IsInstructor(_HasRole):
    """Allows access only to instructors."""

    message = "Only instructors can perform this action."
    role = UserRole.INSTRUCTOR


class IsLmsAdmin(_HasRole):
    """Allows access only to LMS admins."""

    message = "Only LMS admins can perform this action."
    role = UserRole.ADMIN
