"""
Escrow transaction engine for course purchases.

A purchase moves the learner's money into platform escrow and creates an
EscrowTransaction in PENDING_ADMIN. From there:

    admin_approve       PENDING_ADMIN -> PENDING_INSTRUCTOR   (no money moves)
    admin_decline       PENDING_ADMIN -> DECLINED             (escrow -> learner)
    admin_refund        PENDING_ADMIN -> REFUNDED             (escrow -> learner)
    instructor_accept   PENDING_INSTRUCTOR -> COMPLETED       (escrow -> instructor share
                                                               + platform revenue)
    instructor_decline  PENDING_INSTRUCTOR -> DECLINED        (escrow -> learner)

Every transition:
1. Locks the transaction row (select_for_update) inside transaction.atomic()
2. Re-checks the state under the lock; a mismatch raises
   InvalidStateTransitionError, is logged as a warning, and writes nothing
3. Applies the django-fsm transition, the ledger entries and the
   transition log row in the same database transaction

Ledger entries use idempotency keys derived from the transaction id, so
no transaction can ever be refunded or paid out twice.

Usage:
    from payments.services import EscrowService

    tx = EscrowService.initiate_purchase(learner_caller, course_id, "bank-secret")
    EscrowService.admin_approve(admin_caller, tx.id)
    EscrowService.instructor_accept(instructor_caller, tx.id)
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.db.models import Q, QuerySet
from django.utils import timezone
from django_fsm import TransitionNotAllowed

from authentication.context import CallerContext
from authentication.models import UserRole
from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult
from courses.exceptions import CourseNotApproved
from courses.services import CourseService
from payments.exceptions import (
    DuplicatePurchaseError,
    InvalidStateTransitionError,
    TransactionNotFoundError,
)
from payments.ledger.models import AccountType, EntryType, LedgerEntry
from payments.ledger.services import LedgerService
from payments.ledger.types import RecordEntryParams
from payments.locks import check_version
from payments.models import EscrowTransaction, EscrowTransitionLog
from payments.state_machines import EscrowState

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "escrow_transaction"


def calculate_revenue_split(amount: int) -> tuple[int, int]:
    """
    Split a purchase amount between instructor and platform.

    The instructor gets floor(amount * INSTRUCTOR_REVENUE_SHARE_PERCENT / 100);
    the platform gets the remainder, so the two always add up to amount.

    Returns:
        (instructor_share, platform_share)
    """
    percent = settings.INSTRUCTOR_REVENUE_SHARE_PERCENT
    instructor_share = amount * percent // 100
    return instructor_share, amount - instructor_share


class EscrowService(BaseService):
    """
    Service for escrow transaction lifecycle.

    All methods take the acting CallerContext explicitly and raise
    BaseApplicationError subclasses on failure. A failed call leaves the
    ledger and the transaction untouched.
    """

    # =========================================================================
    # Purchase
    # =========================================================================

    @classmethod
    def initiate_purchase(
        cls,
        caller: CallerContext,
        course_id: uuid.UUID,
        provided_secret: str | None,
    ) -> EscrowTransaction:
        """
        Buy a course: debit the learner into escrow and open a transaction.

        The course status is read under a row lock in the same database
        transaction as the debit, so a course declined or edited
        concurrently cannot be bought.

        Raises:
            PermissionDeniedError: If the caller is not a learner
            CourseNotFound: If the course doesn't exist
            CourseNotApproved: If the course is not approved
            DuplicatePurchaseError: If the learner already holds a live purchase
            NoAccount: If the learner has no bank account
            InvalidSecret: If the bank secret is wrong
            InsufficientFunds: If the learner cannot afford the course
        """
        caller.require_role(UserRole.LEARNER)

        logger.info(
            "Initiating course purchase",
            extra={"learner_id": str(caller.id), "course_id": str(course_id)},
        )

        with cls.atomic():
            snapshot = CourseService.get_purchase_snapshot(course_id, for_update=True)
            if not snapshot.is_approved:
                raise CourseNotApproved(
                    "Course is not available for purchase",
                    details={"course_id": str(course_id), "status": snapshot.status},
                )

            live = EscrowTransaction.objects.filter(
                learner_id=caller.id,
                course_id=course_id,
                state__in=EscrowState.live(),
            ).exists()
            if live:
                raise DuplicatePurchaseError(
                    "You already purchased this course or a purchase is under review",
                    details={"course_id": str(course_id)},
                )

            tx = EscrowTransaction.objects.create(
                learner_id=caller.id,
                instructor_id=snapshot.instructor_id,
                course_id=snapshot.course_id,
                course_title=snapshot.title,
                amount=snapshot.price,
            )

            LedgerService.debit(
                caller.id,
                snapshot.price,
                provided_secret,
                entry_type=EntryType.PURCHASE_ESCROWED,
                idempotency_key=f"escrow:{tx.id}:purchase",
                destination=AccountType.PLATFORM_ESCROW,
                reference_type=REFERENCE_TYPE,
                reference_id=tx.id,
                description=f"Purchase of {snapshot.title}",
                created_by=str(caller.id),
            )

            cls._log_transition(tx, None, caller)

        logger.info(
            "Course purchase escrowed",
            extra={
                "transaction_id": str(tx.id),
                "course_id": str(course_id),
                "amount": tx.amount,
                "state": tx.state,
            },
        )
        return tx

    # =========================================================================
    # Admin review
    # =========================================================================

    @classmethod
    def admin_approve(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        """
        Forward a purchase to the instructor. Funds stay in escrow.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            TransactionNotFoundError: If the transaction doesn't exist
            InvalidStateTransitionError: If not PENDING_ADMIN
            StaleRecordError: If expected_version is given and outdated
        """
        caller.require_role(UserRole.ADMIN)
        return cls._transition(
            caller,
            transaction_id,
            action="admin_approve",
            expected_state=EscrowState.PENDING_ADMIN,
            apply=lambda tx: tx.admin_approve(),
            expected_version=expected_version,
        )

    @classmethod
    def admin_decline(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        reason: str = "",
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        """
        Reject a purchase and refund the learner in full.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            TransactionNotFoundError: If the transaction doesn't exist
            InvalidStateTransitionError: If not PENDING_ADMIN
        """
        caller.require_role(UserRole.ADMIN)

        def apply(tx: EscrowTransaction) -> None:
            tx.admin_decline(reason=reason)
            cls._refund_learner(tx, caller)

        return cls._transition(
            caller,
            transaction_id,
            action="admin_decline",
            expected_state=EscrowState.PENDING_ADMIN,
            apply=apply,
            reason=reason,
            expected_version=expected_version,
        )

    @classmethod
    def admin_refund(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        reason: str = "",
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        """
        Cancel an unreviewed purchase and refund the learner in full.

        Used by admins and by the refund_stale_transactions command.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            TransactionNotFoundError: If the transaction doesn't exist
            InvalidStateTransitionError: If not PENDING_ADMIN
        """
        caller.require_role(UserRole.ADMIN)

        def apply(tx: EscrowTransaction) -> None:
            tx.refund(reason=reason)
            cls._refund_learner(tx, caller)

        return cls._transition(
            caller,
            transaction_id,
            action="admin_refund",
            expected_state=EscrowState.PENDING_ADMIN,
            apply=apply,
            reason=reason,
            expected_version=expected_version,
        )

    # =========================================================================
    # Instructor review
    # =========================================================================

    @classmethod
    def instructor_accept(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        """
        Complete a sale: pay the instructor share and the platform share
        out of escrow.

        Raises:
            PermissionDeniedError: If the caller is not an instructor
            TransactionNotFoundError: If missing or not the caller's sale
            InvalidStateTransitionError: If not PENDING_INSTRUCTOR
            NoAccount: If the instructor has no bank account (nothing changes)
        """
        caller.require_role(UserRole.INSTRUCTOR)

        def apply(tx: EscrowTransaction) -> None:
            instructor_share, platform_share = calculate_revenue_split(tx.amount)
            tx.instructor_accept(instructor_share=instructor_share, platform_share=platform_share)
            cls._pay_out(tx, caller)

        return cls._transition(
            caller,
            transaction_id,
            action="instructor_accept",
            expected_state=EscrowState.PENDING_INSTRUCTOR,
            apply=apply,
            expected_version=expected_version,
        )

    @classmethod
    def instructor_decline(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        reason: str = "",
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        """
        Reject a sale and refund the learner in full.

        Raises:
            PermissionDeniedError: If the caller is not an instructor
            TransactionNotFoundError: If missing or not the caller's sale
            InvalidStateTransitionError: If not PENDING_INSTRUCTOR
        """
        caller.require_role(UserRole.INSTRUCTOR)

        def apply(tx: EscrowTransaction) -> None:
            tx.instructor_decline(reason=reason)
            cls._refund_learner(tx, caller)

        return cls._transition(
            caller,
            transaction_id,
            action="instructor_decline",
            expected_state=EscrowState.PENDING_INSTRUCTOR,
            apply=apply,
            reason=reason,
            expected_version=expected_version,
        )

    # =========================================================================
    # History
    # =========================================================================

    @classmethod
    def list_for_caller(
        cls,
        caller: CallerContext,
        include_archived: bool = False,
        state: str | None = None,
    ) -> QuerySet[EscrowTransaction]:
        """
        Transactions visible to the caller, newest first.

        Admins see every transaction, instructors their sales, learners
        their purchases. Rows the caller archived are hidden unless
        include_archived is set.
        """
        queryset = EscrowTransaction.objects.select_related("learner", "instructor", "course")

        if caller.is_admin:
            archived_field = "archived_by_admin"
        elif caller.is_instructor:
            queryset = queryset.filter(instructor_id=caller.id)
            archived_field = "archived_by_instructor"
        else:
            caller.require_role(UserRole.LEARNER)
            queryset = queryset.filter(learner_id=caller.id)
            archived_field = "archived_by_learner"

        if not include_archived:
            queryset = queryset.filter(**{archived_field: False})
        if state:
            queryset = queryset.filter(state=state)
        return queryset.order_by("-created_at")

    @classmethod
    def get_for_caller(cls, caller: CallerContext, transaction_id: uuid.UUID) -> EscrowTransaction:
        tx = cls.list_for_caller(caller, include_archived=True).filter(id=transaction_id).first()
        if tx is None:
            raise TransactionNotFoundError(
                f"Transaction {transaction_id} not found",
                details={"transaction_id": str(transaction_id)},
            )
        return tx

    @classmethod
    def get_ledger_entries(
        cls, caller: CallerContext, transaction_id: uuid.UUID
    ) -> list[LedgerEntry]:
        """
        Money movements of one transaction, oldest first.

        Visible to the same callers as get_for_caller.

        Raises:
            TransactionNotFoundError: If the caller cannot see the transaction
        """
        tx = cls.get_for_caller(caller, transaction_id)
        return LedgerService.get_entries_by_reference(REFERENCE_TYPE, tx.id)

    @classmethod
    def archive_history(cls, caller: CallerContext) -> int:
        """
        Hide the caller's COMPLETED and DECLINED transactions from their lists.

        Soft archive only: rows and ledger entries are kept, pending and
        refunded transactions are untouched, and each role archives only
        its own view.

        Returns:
            Number of transactions archived
        """
        if caller.is_admin:
            scope = Q()
            archived_field = "archived_by_admin"
        elif caller.is_instructor:
            scope = Q(instructor_id=caller.id)
            archived_field = "archived_by_instructor"
        else:
            caller.require_role(UserRole.LEARNER)
            scope = Q(learner_id=caller.id)
            archived_field = "archived_by_learner"

        count = (
            EscrowTransaction.objects.filter(scope)
            .filter(state__in=EscrowState.archivable(), **{archived_field: False})
            .update(**{archived_field: True})
        )

        logger.info(
            "Archived transaction history",
            extra={"caller_id": str(caller.id), "role": caller.role, "count": count},
        )
        return count

    # =========================================================================
    # Operator sweeps
    # =========================================================================

    @classmethod
    def find_stale(cls, older_than: timedelta) -> QuerySet[EscrowTransaction]:
        """PENDING_ADMIN transactions created before now - older_than, oldest first."""
        cutoff = timezone.now() - older_than
        return EscrowTransaction.objects.filter(
            state=EscrowState.PENDING_ADMIN,
            created_at__lt=cutoff,
        ).order_by("created_at")

    @classmethod
    def refund_stale(cls, older_than: timedelta, reason: str = "stale") -> ServiceResult[dict]:
        """
        Refund every purchase that has waited for admin review too long.

        Each transaction is refunded in its own database transaction, so
        one failure does not undo the others. A transaction resolved by an
        admin in the meantime is skipped.

        Returns:
            ServiceResult with {"refunded": [...ids], "skipped": [...ids]}
        """
        operator = CallerContext.system()
        refunded: list[str] = []
        skipped: list[str] = []

        logger.info(
            "Starting stale escrow refund sweep",
            extra={"older_than_seconds": int(older_than.total_seconds())},
        )

        for tx_id in list(cls.find_stale(older_than).values_list("id", flat=True)):
            outcome = cls._refund_one(operator, tx_id, reason)
            (refunded if outcome else skipped).append(str(tx_id))

        logger.info(
            f"Stale escrow refund sweep complete: refunded {len(refunded)}",
            extra={"refunded_count": len(refunded), "skipped_count": len(skipped)},
        )
        return ServiceResult.ok({"refunded": refunded, "skipped": skipped})

    @classmethod
    def _refund_one(
        cls,
        operator: CallerContext,
        transaction_id: uuid.UUID,
        reason: str,
    ) -> ServiceResult[EscrowTransaction]:
        try:
            tx = cls.admin_refund(operator, transaction_id, reason=reason)
        except InvalidStateTransitionError as e:
            # Resolved by an admin after the sweep selected it
            return cls.handle_exception(e, "Stale refund skipped", log_level=logging.INFO)
        except BaseApplicationError as e:
            return cls.handle_exception(e, f"Failed to refund stale transaction {transaction_id}")
        return ServiceResult.ok(tx)

    # =========================================================================
    # Internals
    # =========================================================================

    @classmethod
    def _transition(
        cls,
        caller: CallerContext,
        transaction_id: uuid.UUID,
        *,
        action: str,
        expected_state: str,
        apply: Callable[[EscrowTransaction], None],
        reason: str = "",
        expected_version: int | None = None,
    ) -> EscrowTransaction:
        with cls.atomic():
            tx = cls._lock(transaction_id, expected_version)

            if caller.is_instructor and tx.instructor_id != caller.id:
                raise TransactionNotFoundError(
                    f"Transaction {transaction_id} not found",
                    details={"transaction_id": str(transaction_id)},
                )

            from_state = tx.state
            if from_state != expected_state:
                cls._reject(tx, action, expected_state, caller)

            try:
                apply(tx)
            except TransitionNotAllowed:
                cls._reject(tx, action, expected_state, caller)

            tx.save()
            cls._log_transition(tx, from_state, caller, reason)

        logger.info(
            f"Escrow transaction {action}",
            extra={
                "transaction_id": str(tx.id),
                "from_state": from_state,
                "to_state": tx.state,
                "caller_id": str(caller.id) if caller.id else None,
                "role": caller.role,
            },
        )
        return tx

    @staticmethod
    def _lock(transaction_id: uuid.UUID, expected_version: int | None) -> EscrowTransaction:
        if expected_version is not None:
            return check_version(
                EscrowTransaction,
                transaction_id,
                expected_version,
                not_found_error=TransactionNotFoundError,
            )
        try:
            return EscrowTransaction.objects.select_for_update().get(id=transaction_id)
        except EscrowTransaction.DoesNotExist:
            raise TransactionNotFoundError(
                f"Transaction {transaction_id} not found",
                details={"transaction_id": str(transaction_id)},
            )

    @staticmethod
    def _reject(
        tx: EscrowTransaction,
        action: str,
        expected_state: str,
        caller: CallerContext,
    ) -> None:
        logger.warning(
            f"Rejected escrow {action}: transaction is {tx.state}",
            extra={
                "transaction_id": str(tx.id),
                "current_state": tx.state,
                "expected_state": expected_state,
                "caller_id": str(caller.id) if caller.id else None,
                "role": caller.role,
            },
        )
        raise InvalidStateTransitionError(
            f"Cannot {action} transaction in '{tx.state}' state",
            details={
                "transaction_id": str(tx.id),
                "current_state": tx.state,
                "expected_state": expected_state,
                "action": action,
            },
        )

    @staticmethod
    def _refund_learner(tx: EscrowTransaction, caller: CallerContext) -> None:
        LedgerService.credit(
            tx.learner_id,
            tx.amount,
            entry_type=EntryType.REFUND,
            idempotency_key=f"escrow:{tx.id}:refund",
            source=AccountType.PLATFORM_ESCROW,
            reference_type=REFERENCE_TYPE,
            reference_id=tx.id,
            description=f"Refund for {tx.course_title}",
            created_by=str(caller.id) if caller.id else "operator",
        )

    @staticmethod
    def _pay_out(tx: EscrowTransaction, caller: CallerContext) -> None:
        """Escrow -> instructor share and escrow -> platform revenue, atomically."""
        instructor_account = LedgerService.get_account_for_owner(tx.instructor_id)
        escrow = LedgerService.get_system_account(AccountType.PLATFORM_ESCROW)
        revenue = LedgerService.get_system_account(AccountType.PLATFORM_REVENUE)

        entries = []
        if tx.instructor_share:
            entries.append(
                RecordEntryParams(
                    debit_account_id=escrow.id,
                    credit_account_id=instructor_account.id,
                    amount=tx.instructor_share,
                    entry_type=EntryType.INSTRUCTOR_PAYOUT,
                    idempotency_key=f"escrow:{tx.id}:instructor_payout",
                    reference_type=REFERENCE_TYPE,
                    reference_id=tx.id,
                    description=f"Sale of {tx.course_title}",
                    created_by=str(caller.id),
                )
            )
        if tx.platform_share:
            entries.append(
                RecordEntryParams(
                    debit_account_id=escrow.id,
                    credit_account_id=revenue.id,
                    amount=tx.platform_share,
                    entry_type=EntryType.FEE_COLLECTED,
                    idempotency_key=f"escrow:{tx.id}:platform_fee",
                    reference_type=REFERENCE_TYPE,
                    reference_id=tx.id,
                    description=f"Platform share of {tx.course_title}",
                    created_by=str(caller.id),
                )
            )
        LedgerService.record_entries(entries)

    @staticmethod
    def _log_transition(
        tx: EscrowTransaction,
        from_state: str | None,
        caller: CallerContext,
        reason: str = "",
    ) -> None:
        EscrowTransitionLog.objects.create(
            transaction=tx,
            from_state=from_state,
            to_state=tx.state,
            actor_id=caller.id,
            actor_role=caller.role,
            reason=reason or "",
        )
