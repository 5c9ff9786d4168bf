"""
Ledger service layer for bank operations.

This module provides the LedgerService class which encapsulates all
business logic of the Ledger Store. Every balance change goes through
record_entries(), which locks the touched accounts, validates the debit
side and writes an immutable LedgerEntry plus the stored balances in one
database transaction.

Usage:
    from payments.ledger.services import LedgerService

    LedgerService.open_account(user.id, "ACC-1001", "s3cret")
    LedgerService.get_balance(user.id)  # 5000

    LedgerService.debit(
        learner.id,
        900,
        "s3cret",
        entry_type=EntryType.PURCHASE_ESCROWED,
        idempotency_key=f"escrow:{tx.id}:purchase",
    )
"""

from __future__ import annotations

import logging
import uuid

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q

from core.exceptions import ValidationError

from .exceptions import (
    DuplicateAccount,
    InactiveAccount,
    InsufficientFunds,
    InvalidSecret,
    NoAccount,
)
from .models import AccountType, EntryType, LedgerAccount, LedgerEntry
from .types import AccountSummary, RecordEntryParams

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Service class for ledger operations.

    Key features:
    - Atomic transactions for multi-entry operations
    - Idempotency via unique keys (safe to retry)
    - Balance validation before debits
    - Account locking in id order to prevent deadlocks

    All methods are static - no instance state is maintained.
    """

    # =========================================================================
    # Accounts
    # =========================================================================

    @staticmethod
    def get_system_account(account_type: AccountType | str) -> LedgerAccount:
        """
        Get or create the platform account of the given type.

        The treasury is the only account allowed to go negative.
        """
        account, created = LedgerAccount.objects.get_or_create(
            type=account_type,
            owner_id=None,
            defaults={"allow_negative": account_type == AccountType.PLATFORM_TREASURY},
        )
        if created:
            logger.info(
                f"Created system ledger account {account_type}",
                extra={"account_id": str(account.id), "account_type": account_type},
            )
        return account

    @staticmethod
    def open_account(
        owner_id: uuid.UUID,
        account_number: str,
        initial_secret: str,
    ) -> LedgerAccount:
        """
        Open a bank account for a user and grant the opening bonus.

        Args:
            owner_id: User id of the account holder
            account_number: Account number chosen by the user (unique)
            initial_secret: Secret required for later debits (stored hashed)

        Returns:
            The new LedgerAccount with balance == LEDGER_OPENING_BONUS

        Raises:
            ValidationError: If account_number or secret is blank
            DuplicateAccount: If the owner already has an account or the
                account number is taken
        """
        account_number = (account_number or "").strip()
        errors = {}
        if not account_number:
            errors["account_number"] = ["This field is required."]
        if not initial_secret:
            errors["secret"] = ["This field is required."]
        if errors:
            raise ValidationError("Invalid account details", details=errors)

        bonus = settings.LEDGER_OPENING_BONUS

        with transaction.atomic():
            if LedgerAccount.objects.filter(owner_id=owner_id).exists():
                raise DuplicateAccount(
                    "Bank account already set up for this user",
                    details={"owner_id": str(owner_id)},
                )
            if LedgerAccount.objects.filter(account_number=account_number).exists():
                raise DuplicateAccount(
                    "Account number already exists",
                    details={"account_number": account_number},
                )

            account = LedgerAccount(
                type=AccountType.USER_BALANCE,
                owner_id=owner_id,
                account_number=account_number,
            )
            account.set_secret(initial_secret)
            try:
                with transaction.atomic():
                    account.save(force_insert=True)
            except IntegrityError:
                # Concurrent setup won the unique constraint
                raise DuplicateAccount(
                    "Bank account or account number already exists",
                    details={"owner_id": str(owner_id), "account_number": account_number},
                )

            if bonus > 0:
                treasury = LedgerService.get_system_account(AccountType.PLATFORM_TREASURY)
                LedgerService.record_entries(
                    [
                        RecordEntryParams(
                            debit_account_id=treasury.id,
                            credit_account_id=account.id,
                            amount=bonus,
                            entry_type=EntryType.OPENING_BONUS,
                            idempotency_key=f"account:{account.id}:opening_bonus",
                            reference_type="ledger_account",
                            reference_id=account.id,
                            description="Opening balance",
                            created_by=str(owner_id),
                        )
                    ]
                )

        logger.info(
            "Opened bank account",
            extra={
                "account_id": str(account.id),
                "owner_id": str(owner_id),
                "opening_bonus": bonus,
            },
        )
        return LedgerAccount.objects.get(id=account.id)

    @staticmethod
    def get_account_for_owner(owner_id: uuid.UUID) -> LedgerAccount:
        """
        Get the bank account of a user.

        Raises:
            NoAccount: If the user has not set up a bank account
        """
        try:
            return LedgerAccount.objects.get(owner_id=owner_id)
        except LedgerAccount.DoesNotExist:
            raise NoAccount(
                "No bank account set up for this user",
                details={"owner_id": str(owner_id)},
            )

    @staticmethod
    def get_balance(owner_id: uuid.UUID) -> int:
        """
        Return the current balance of a user's bank account.

        Raises:
            NoAccount: If the user has not set up a bank account
        """
        return LedgerService.get_account_for_owner(owner_id).balance

    @staticmethod
    def get_account_summary(owner_id: uuid.UUID) -> AccountSummary:
        account = LedgerService.get_account_for_owner(owner_id)
        return AccountSummary(
            owner_id=owner_id,
            account_number=account.account_number,
            balance=account.balance,
        )

    # =========================================================================
    # Movements
    # =========================================================================

    @staticmethod
    def debit(
        owner_id: uuid.UUID,
        amount: int,
        provided_secret: str | None,
        *,
        entry_type: str,
        idempotency_key: str,
        destination: AccountType | str = AccountType.PLATFORM_ESCROW,
        reference_type: str | None = None,
        reference_id: uuid.UUID | None = None,
        description: str | None = None,
        created_by: str | None = None,
    ) -> int:
        """
        Take money out of a user's account into a platform account.

        Args:
            owner_id: User whose account is debited
            amount: Positive whole units
            provided_secret: Must match the account secret
            entry_type: EntryType recorded on the entry
            idempotency_key: Replaying the same key moves no money again
            destination: System account credited (escrow by default)

        Returns:
            The account balance after the debit

        Raises:
            ValidationError: If amount is not a positive integer
            NoAccount: If the user has no account
            InvalidSecret: If provided_secret does not match
            InsufficientFunds: If balance < amount
        """
        LedgerService._validate_amount(amount)
        account = LedgerService.get_account_for_owner(owner_id)

        if not account.check_secret(provided_secret):
            logger.warning(
                "Rejected debit: account secret mismatch",
                extra={"account_id": str(account.id), "owner_id": str(owner_id)},
            )
            raise InvalidSecret(
                "Invalid bank secret",
                details={"owner_id": str(owner_id)},
            )

        target = LedgerService.get_system_account(destination)
        LedgerService.record_entries(
            [
                RecordEntryParams(
                    debit_account_id=account.id,
                    credit_account_id=target.id,
                    amount=amount,
                    entry_type=entry_type,
                    idempotency_key=idempotency_key,
                    reference_type=reference_type,
                    reference_id=reference_id,
                    description=description,
                    created_by=created_by,
                )
            ]
        )
        new_balance = LedgerAccount.objects.values_list("balance", flat=True).get(id=account.id)
        logger.info(
            "Debited bank account",
            extra={
                "account_id": str(account.id),
                "amount": amount,
                "entry_type": entry_type,
                "balance": new_balance,
            },
        )
        return new_balance

    @staticmethod
    def credit(
        owner_id: uuid.UUID,
        amount: int,
        *,
        entry_type: str,
        idempotency_key: str,
        source: AccountType | str = AccountType.PLATFORM_ESCROW,
        reference_type: str | None = None,
        reference_id: uuid.UUID | None = None,
        description: str | None = None,
        created_by: str | None = None,
    ) -> int:
        """
        Move money from a platform account into a user's account.

        Returns:
            The account balance after the credit

        Raises:
            ValidationError: If amount is not a positive integer
            NoAccount: If the user has no account
            InsufficientFunds: If the source account cannot cover amount
        """
        LedgerService._validate_amount(amount)
        account = LedgerService.get_account_for_owner(owner_id)
        origin = LedgerService.get_system_account(source)

        LedgerService.record_entries(
            [
                RecordEntryParams(
                    debit_account_id=origin.id,
                    credit_account_id=account.id,
                    amount=amount,
                    entry_type=entry_type,
                    idempotency_key=idempotency_key,
                    reference_type=reference_type,
                    reference_id=reference_id,
                    description=description,
                    created_by=created_by,
                )
            ]
        )
        new_balance = LedgerAccount.objects.values_list("balance", flat=True).get(id=account.id)
        logger.info(
            "Credited bank account",
            extra={
                "account_id": str(account.id),
                "amount": amount,
                "entry_type": entry_type,
                "balance": new_balance,
            },
        )
        return new_balance

    @staticmethod
    def _validate_amount(amount: int) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValidationError(
                "Amount must be a positive integer",
                error_code="INVALID_AMOUNT",
                details={"amount": amount},
            )

    @staticmethod
    def _validate_account_for_debit(account: LedgerAccount, amount: int) -> None:
        """
        Validate that an account can be debited.

        Raises:
            InactiveAccount: If account is inactive
            InsufficientFunds: If account lacks funds
        """
        if not account.is_active:
            raise InactiveAccount(
                f"Account {account.id} is inactive",
                details={"account_id": str(account.id)},
            )

        if not account.allow_negative and account.balance < amount:
            raise InsufficientFunds(
                account_id=account.id,
                required=amount,
                available=account.balance,
            )

    @staticmethod
    def _validate_account_for_credit(account: LedgerAccount) -> None:
        if not account.is_active:
            raise InactiveAccount(
                f"Account {account.id} is inactive",
                details={"account_id": str(account.id)},
            )

    @staticmethod
    def record_entries(entries: list[RecordEntryParams]) -> list[LedgerEntry]:
        """
        Record multiple ledger entries atomically.

        All entries succeed or all fail. Idempotent per entry - an existing
        entry with the same idempotency_key is returned and its amount is
        not applied again.

        Entries are processed sequentially, so balance changes from
        earlier entries in the batch affect validation of later entries.

        Raises:
            NoAccount: If any account doesn't exist
            InactiveAccount: If any account is inactive
            InsufficientFunds: If any debit account lacks funds
        """
        if not entries:
            return []

        results: list[LedgerEntry] = []

        with transaction.atomic():
            account_ids: set[uuid.UUID] = set()
            for params in entries:
                account_ids.add(params.debit_account_id)
                account_ids.add(params.credit_account_id)

            # Same lock order for every caller prevents circular waits
            accounts = {
                acc.id: acc
                for acc in LedgerAccount.objects.filter(id__in=account_ids)
                .select_for_update()
                .order_by("id")
            }

            for account_id in account_ids:
                if account_id not in accounts:
                    raise NoAccount(
                        f"Account {account_id} not found",
                        details={"account_id": str(account_id)},
                    )

            touched: dict[uuid.UUID, LedgerAccount] = {}

            for params in entries:
                debit_account = accounts[params.debit_account_id]
                credit_account = accounts[params.credit_account_id]

                # Idempotency check must precede the balance check
                existing = LedgerEntry.objects.filter(
                    idempotency_key=params.idempotency_key
                ).first()
                if existing is not None:
                    logger.info(
                        "Ledger entry already recorded",
                        extra={"idempotency_key": params.idempotency_key},
                    )
                    results.append(existing)
                    continue

                LedgerService._validate_account_for_debit(debit_account, params.amount)
                LedgerService._validate_account_for_credit(credit_account)

                try:
                    with transaction.atomic():
                        entry = LedgerEntry.objects.create(
                            idempotency_key=params.idempotency_key,
                            debit_account=debit_account,
                            credit_account=credit_account,
                            amount=params.amount,
                            entry_type=params.entry_type,
                            reference_id=params.reference_id,
                            reference_type=params.reference_type,
                            description=params.description,
                            metadata=params.metadata or {},
                            created_by=params.created_by,
                        )
                except IntegrityError:
                    # Another process recorded the same key first
                    results.append(
                        LedgerEntry.objects.get(idempotency_key=params.idempotency_key)
                    )
                    continue

                debit_account.balance -= params.amount
                credit_account.balance += params.amount
                touched[debit_account.id] = debit_account
                touched[credit_account.id] = credit_account
                results.append(entry)

            for account in touched.values():
                account.save(update_fields=["balance", "updated_at"])

        return results

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def get_entries_for_account(
        account_id: uuid.UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        """Entries where the account is debited or credited, newest first."""
        return list(
            LedgerEntry.objects.filter(
                Q(debit_account_id=account_id) | Q(credit_account_id=account_id)
            ).order_by("-created_at")[offset : offset + limit]
        )

    @staticmethod
    def get_entries_by_reference(
        reference_type: str,
        reference_id: uuid.UUID,
    ) -> list[LedgerEntry]:
        """
        Get all entries for a given reference, oldest first.

        Used to audit every money movement of one escrow transaction.
        """
        return list(
            LedgerEntry.objects.filter(
                reference_type=reference_type,
                reference_id=reference_id,
            ).order_by("created_at")
        )
