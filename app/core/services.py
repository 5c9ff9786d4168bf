"""
Base service layer patterns.

- BaseService: classmethod-only services with a shared transaction
  helper and exception-to-result conversion
- ServiceResult: Outcome of one item in a batch loop

Single operations raise BaseApplicationError subclasses and the caller
(view, management command) decides how to surface them. Loops over many
records, such as the stale purchase sweep, collect a ServiceResult per
record instead of aborting on the first failure.

Usage:
    from core.services import BaseService, ServiceResult

    class StaleSweep(BaseService):
        @classmethod
        def refund_one(cls, caller, tx_id) -> ServiceResult[EscrowTransaction]:
            try:
                tx = EscrowService.admin_refund(caller, tx_id)
            except ConflictError as e:
                return cls.handle_exception(e, "refund sweep", log_level=logging.INFO)
            return ServiceResult.ok(tx)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Result of one service call inside a batch.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful
        error: Error message if failed
        error_code: Machine-readable error code if failed
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def from_exception(cls, exc: Exception) -> ServiceResult[T]:
        """
        Failed result for exc.

        Application errors keep their own error_code; anything else falls
        back to the exception class name.
        """
        code = getattr(exc, "error_code", None) or exc.__class__.__name__.upper()
        message = getattr(exc, "message", None) or str(exc)
        return cls(success=False, error=message, error_code=code)

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Every service method receives the acting CallerContext explicitly
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Nested use creates a savepoint.
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Log exc and convert it to a failed ServiceResult.

        Tracebacks are attached at ERROR level and above.
        """
        message = f"{context}: {exc}" if context else str(exc)
        cls.get_logger().log(log_level, message, exc_info=log_level >= logging.ERROR)
        return ServiceResult.from_exception(exc)
