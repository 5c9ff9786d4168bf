"""
Ledger models for double-entry bookkeeping.

This module defines the Ledger Store of the LMS bank simulation:
- LedgerAccount: Holds a balance (learner/instructor banks, platform escrow,
  platform revenue, platform treasury)
- LedgerEntry: Immutable record of one movement between two accounts

Every balance change is one LedgerEntry debiting one account and crediting
another, so money is conserved across the system. Each account also keeps
a stored balance that is updated under a row lock in the same database
transaction as the entry; get_entries_balance() recomputes it from entries
for reconciliation.

Usage:
    from payments.ledger.models import LedgerAccount, AccountType

    bank = LedgerAccount.objects.get(owner_id=user.id)
    bank.balance                # stored balance
    bank.get_entries_balance()  # same value, recomputed from entries
"""

from __future__ import annotations

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models import Case, Q, Sum, Value, When
from django.db.models.functions import Coalesce

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class AccountType(models.TextChoices):
    """
    Types of ledger accounts.

    Values:
        USER_BALANCE: A learner's or instructor's simulated bank account
        PLATFORM_ESCROW: Purchase money held until a transaction resolves
        PLATFORM_REVENUE: Platform's share of completed purchases
        PLATFORM_TREASURY: Source of opening bonuses and approval incentives;
            may go negative (it stands for money entering the simulation)
    """

    USER_BALANCE = "user_balance", "User Balance"
    PLATFORM_ESCROW = "platform_escrow", "Platform Escrow"
    PLATFORM_REVENUE = "platform_revenue", "Platform Revenue"
    PLATFORM_TREASURY = "platform_treasury", "Platform Treasury"


class EntryType(models.TextChoices):
    """
    Types of ledger entries.

    Values:
        OPENING_BONUS: Treasury -> new account seed money
        PURCHASE_ESCROWED: Learner -> escrow when a purchase is initiated
        INSTRUCTOR_PAYOUT: Escrow -> instructor share on completion
        FEE_COLLECTED: Escrow -> platform revenue share on completion
        REFUND: Escrow -> learner on decline or refund
        APPROVAL_INCENTIVE: Treasury -> instructor on first course approval
    """

    OPENING_BONUS = "opening_bonus", "Opening Bonus"
    PURCHASE_ESCROWED = "purchase_escrowed", "Purchase Escrowed"
    INSTRUCTOR_PAYOUT = "instructor_payout", "Instructor Payout"
    FEE_COLLECTED = "fee_collected", "Fee Collected"
    REFUND = "refund", "Refund"
    APPROVAL_INCENTIVE = "approval_incentive", "Approval Incentive"


# Account types that belong to the platform rather than a user
SYSTEM_ACCOUNT_TYPES = (
    AccountType.PLATFORM_ESCROW,
    AccountType.PLATFORM_REVENUE,
    AccountType.PLATFORM_TREASURY,
)


class LedgerAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    A ledger account that holds a balance.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        type: Account category
        owner_id: User id for USER_BALANCE accounts, NULL for system accounts
        account_number: User-chosen account number (unique, NULL for system accounts)
        secret_hash: Hashed account secret; debits must present the raw secret
        balance: Stored balance in whole units
        allow_negative: Whether balance can go negative (treasury only)
        is_active: Whether the account accepts new entries

    Constraints:
        - At most one account per owner
        - At most one system account per type
        - balance >= 0 unless allow_negative
    """

    type = models.CharField(
        max_length=50,
        choices=AccountType.choices,
        help_text="Category of this account",
    )
    owner_id = models.UUIDField(
        null=True,
        blank=True,
        db_index=True,
        help_text="UUID of the user that owns this account",
    )
    account_number = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        unique=True,
        help_text="Account number chosen at setup",
    )
    secret_hash = models.CharField(
        max_length=128,
        blank=True,
        help_text="Hashed account secret",
    )
    balance = models.BigIntegerField(
        default=0,
        help_text="Current balance in whole units",
    )
    allow_negative = models.BooleanField(
        default=False,
        help_text="Whether this account can have a negative balance",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this account is active",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner_id"],
                condition=Q(owner_id__isnull=False),
                name="unique_ledger_account_per_owner",
            ),
            models.UniqueConstraint(
                fields=["type"],
                condition=Q(owner_id__isnull=True),
                name="unique_system_account_per_type",
            ),
            models.CheckConstraint(
                condition=Q(balance__gte=0) | Q(allow_negative=True),
                name="ledger_account_balance_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["type", "is_active"], name="ledger_acct_type_active_idx"),
        ]

    def __str__(self) -> str:
        if self.account_number:
            return f"{self.get_type_display()} #{self.account_number}"
        return self.get_type_display()

    def set_secret(self, raw_secret: str) -> None:
        self.secret_hash = make_password(raw_secret)

    def check_secret(self, raw_secret: str | None) -> bool:
        """Return True if raw_secret matches the stored hash."""
        if not raw_secret or not self.secret_hash:
            return False
        return check_password(raw_secret, self.secret_hash)

    def get_entries_balance(self) -> int:
        """
        Recompute the balance from entries.

        Sum of all credits to this account minus all debits from it.
        Always equal to the stored balance; used for reconciliation.
        """
        result = LedgerEntry.objects.filter(
            Q(credit_account=self) | Q(debit_account=self)
        ).aggregate(
            credits=Coalesce(
                Sum(
                    Case(
                        When(credit_account=self, then="amount"),
                        default=Value(0),
                        output_field=models.BigIntegerField(),
                    )
                ),
                Value(0),
                output_field=models.BigIntegerField(),
            ),
            debits=Coalesce(
                Sum(
                    Case(
                        When(debit_account=self, then="amount"),
                        default=Value(0),
                        output_field=models.BigIntegerField(),
                    )
                ),
                Value(0),
                output_field=models.BigIntegerField(),
            ),
        )
        return result["credits"] - result["debits"]


class LedgerEntry(UUIDPrimaryKeyMixin, models.Model):
    """
    A ledger entry recording movement of money between accounts.

    Entries are immutable once created. A refund is a new entry, never an
    edit of the purchase entry.

    Fields:
        debit_account: Account money is taken from
        credit_account: Account money is added to
        amount: Amount in whole units (always positive)
        entry_type: Category of this entry
        reference_type / reference_id: Business entity this entry belongs to
            ('escrow_transaction', 'course', 'ledger_account')
        description: Human-readable description
        metadata: Arbitrary JSON data
        created_by: Id of the caller that caused the entry
        idempotency_key: Unique key; recording the same key twice is a no-op

    Example:
        LedgerEntry.objects.create(
            debit_account=escrow,
            credit_account=learner_bank,
            amount=900,
            entry_type=EntryType.REFUND,
            idempotency_key=f"escrow:{tx.id}:refund",
        )
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this entry was recorded",
    )

    debit_account = models.ForeignKey(
        LedgerAccount,
        on_delete=models.PROTECT,
        related_name="debit_entries",
        help_text="Account money is taken from",
    )
    credit_account = models.ForeignKey(
        LedgerAccount,
        on_delete=models.PROTECT,
        related_name="credit_entries",
        help_text="Account money is added to",
    )
    amount = models.PositiveBigIntegerField(
        help_text="Amount in whole units (always positive)",
    )

    entry_type = models.CharField(
        max_length=50,
        choices=EntryType.choices,
        help_text="Category of this entry",
    )
    reference_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="UUID of related business entity",
    )
    reference_type = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Type of related entity (e.g., 'escrow_transaction')",
    )

    description = models.TextField(
        null=True,
        blank=True,
        help_text="Human-readable description of this entry",
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Arbitrary JSON data for extensibility",
    )

    created_by = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Identifier of the caller that created this entry",
    )
    idempotency_key = models.CharField(
        max_length=255,
        unique=True,
        help_text="Unique key to prevent duplicate entries",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "ledger entries"
        indexes = [
            models.Index(
                fields=["reference_type", "reference_id"],
                name="ledger_entry_reference_idx",
            ),
            models.Index(fields=["entry_type"], name="ledger_entry_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="ledger_entry_amount_positive",
            )
        ]

    def __str__(self) -> str:
        return f"{self.get_entry_type_display()}: {self.amount}"
