"""
Optimistic locking helper for escrow and course records.

check_version() combines a version check with select_for_update: the
row is locked for the rest of the surrounding transaction only if it
still carries the version the caller read.

Usage:
    from payments.locks import check_version

    with transaction.atomic():
        tx = check_version(EscrowTransaction, tx_id, expected_version=3)
        tx.admin_approve()
        tx.save()  # Version auto-increments (core.model_mixins.VersionedMixin)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from django.db import models, transaction

from core.exceptions import NotFoundError
from payments.exceptions import StaleRecordError

if TYPE_CHECKING:
    from typing import Any

# Type variable for model classes
T = TypeVar("T", bound=models.Model)


def check_version(
    model_class: type[T],
    pk: Any,
    expected_version: int,
    not_found_error: type[NotFoundError] = NotFoundError,
) -> T:
    """
    Atomically check version and lock a record for update.

    Args:
        model_class: Django model class (must have 'version' field)
        pk: Primary key of the record
        expected_version: Version the caller expects
        not_found_error: NotFoundError subclass raised when the row is missing

    Returns:
        The locked model instance

    Raises:
        StaleRecordError: If version doesn't match (concurrent modification)
        NotFoundError: If record doesn't exist

    Note:
        Must be called within a transaction context. The lock is held
        until the outer transaction commits or rolls back.
    """
    with transaction.atomic():
        instance = (
            model_class.objects.select_for_update()
            .filter(pk=pk, version=expected_version)
            .first()
        )

        if instance is None:
            current_version = (
                model_class.objects.filter(pk=pk).values_list("version", flat=True).first()
            )
            model_name = model_class.__name__
            if current_version is None:
                raise not_found_error(
                    f"{model_name} {pk} not found",
                    details={"pk": str(pk)},
                )

            raise StaleRecordError(
                f"{model_name} {pk} has been modified "
                f"(expected version {expected_version}, current {current_version})",
                details={
                    "pk": str(pk),
                    "expected_version": expected_version,
                    "current_version": current_version,
                },
            )

        return instance


__all__ = [
    "check_version",
]
