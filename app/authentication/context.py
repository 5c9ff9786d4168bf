"""
Caller context passed explicitly into every service operation.

Views resolve the authenticated user into a CallerContext once and hand
it to the service layer. Services never look at request objects,
thread-locals or other ambient state to decide who is acting.

Usage:
    from authentication.context import CallerContext, resolve_caller

    caller = resolve_caller(request.user)
    EscrowService.admin_approve(caller, transaction_id)

    # Tests and management commands build one directly
    operator = CallerContext.system()
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from authentication.models import UserRole
from core.exceptions import PermissionDeniedError


@dataclass(frozen=True)
class CallerContext:
    """
    Identity and role of whoever invokes an operation.

    Attributes:
        id: User id of the caller (None for the operator/system caller)
        role: One of UserRole values
    """

    id: uuid.UUID | None
    role: str

    @classmethod
    def system(cls) -> CallerContext:
        """Admin-role caller for operator tooling (management commands)."""
        return cls(id=None, role=UserRole.ADMIN)

    @property
    def is_learner(self) -> bool:
        return self.role == UserRole.LEARNER

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def require_role(self, *roles: str) -> None:
        """
        Raise PermissionDeniedError unless the caller holds one of roles.

        Raises:
            PermissionDeniedError: error_code ROLE_REQUIRED
        """
        if self.role not in roles:
            raise PermissionDeniedError(
                f"This action requires role: {', '.join(roles)}",
                error_code="ROLE_REQUIRED",
                details={"required_roles": list(roles), "caller_role": self.role},
            )


def resolve_caller(user) -> CallerContext:
    """
    Build a CallerContext from an authenticated Django user.

    Raises:
        PermissionDeniedError: If the user is anonymous or inactive
    """
    if user is None or not user.is_authenticated or not user.is_active:
        raise PermissionDeniedError(
            "Authentication required",
            error_code="NOT_AUTHENTICATED",
        )
    return CallerContext(id=user.id, role=user.role)
