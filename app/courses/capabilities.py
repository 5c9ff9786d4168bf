"""
Operator capabilities for the course approval gate.

Approving a course pays money out of the platform treasury, so the
approving caller must prove an operator capability beyond holding the
admin role. The check is a protocol so a deployment can swap the shared
passphrase for per-operator credentials through
settings.COURSE_APPROVAL_CAPABILITY.

Usage:
    from courses.capabilities import get_operator_capability

    capability = get_operator_capability()
    capability.verify(caller, request_data.get("operator_secret"))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from django.conf import settings
from django.utils.crypto import constant_time_compare
from django.utils.module_loading import import_string

from authentication.models import UserRole
from payments.ledger.exceptions import InvalidSecret

if TYPE_CHECKING:
    from authentication.context import CallerContext

logger = logging.getLogger(__name__)


@runtime_checkable
class OperatorCapability(Protocol):
    """
    Protocol for approval capabilities.

    verify() returns None when the caller may approve and raises
    PermissionDeniedError (or its subclass InvalidSecret) otherwise.
    """

    def verify(self, caller: CallerContext, operator_secret: str | None) -> None: ...


class SharedPassphraseCapability:
    """
    Capability backed by one shared operator passphrase.

    The caller must hold the admin role and present the passphrase
    configured in settings.COURSE_APPROVAL_PASSPHRASE. Comparison is
    constant-time.
    """

    def __init__(self, passphrase: str | None = None):
        self.passphrase = (
            passphrase if passphrase is not None else settings.COURSE_APPROVAL_PASSPHRASE
        )

    def verify(self, caller: CallerContext, operator_secret: str | None) -> None:
        caller.require_role(UserRole.ADMIN)

        if not self.passphrase or not operator_secret or not constant_time_compare(
            operator_secret, self.passphrase
        ):
            logger.warning(
                "Rejected course approval: operator secret mismatch",
                extra={"caller_id": str(caller.id) if caller.id else None},
            )
            raise InvalidSecret("Invalid operator secret")


def get_operator_capability() -> OperatorCapability:
    """Instantiate the capability class named in settings."""
    return import_string(settings.COURSE_APPROVAL_CAPABILITY)()
