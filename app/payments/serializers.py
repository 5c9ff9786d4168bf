"""
DRF serializers for payments app.

This module provides serializers for:
- Bank account setup, balance display and statements
- Course purchases
- Escrow transaction listings (with denormalized learner and course data)
- Admin and instructor actions on transactions

Related files:
    - services/escrow_service.py: EscrowService
    - ledger/services.py: LedgerService
    - views.py: Payment API views
"""

from __future__ import annotations

from rest_framework import serializers

from payments.ledger.models import LedgerEntry
from payments.models import EscrowTransaction, EscrowTransitionLog


class BankAccountCreateSerializer(serializers.Serializer):
    """Request body for opening a bank account."""

    account_number = serializers.CharField(max_length=64)
    secret = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)


class AccountSummarySerializer(serializers.Serializer):
    """Account number and current balance of the caller's bank account."""

    account_number = serializers.CharField(read_only=True)
    balance = serializers.IntegerField(read_only=True)


class PurchaseCreateSerializer(serializers.Serializer):
    """Request body for buying a course."""

    course_id = serializers.UUIDField()
    secret = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)


class LedgerEntrySerializer(serializers.ModelSerializer):
    """
    One money movement.

    With an "account_id" in the serializer context, direction tells whether
    that account was debited (out) or credited (in).
    """

    direction = serializers.SerializerMethodField()

    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "entry_type",
            "amount",
            "direction",
            "reference_type",
            "reference_id",
            "description",
            "created_at",
        ]
        read_only_fields = fields

    def get_direction(self, obj: LedgerEntry) -> str | None:
        account_id = self.context.get("account_id")
        if account_id is None:
            return None
        return "out" if obj.debit_account_id == account_id else "in"


class EscrowTransitionSerializer(serializers.ModelSerializer):
    class Meta:
        model = EscrowTransitionLog
        fields = ["from_state", "to_state", "actor_role", "reason", "created_at"]
        read_only_fields = fields


class EscrowTransactionSerializer(serializers.ModelSerializer):
    """
    Escrow transaction for listings.

    Learner and instructor display data come from the related users;
    course title is the snapshot taken at purchase time, so it survives
    course deletion.
    """

    learner_name = serializers.CharField(source="learner.name", read_only=True)
    learner_email = serializers.EmailField(source="learner.email", read_only=True)
    instructor_name = serializers.CharField(source="instructor.name", read_only=True)

    class Meta:
        model = EscrowTransaction
        fields = [
            "id",
            "learner_id",
            "learner_name",
            "learner_email",
            "instructor_id",
            "instructor_name",
            "course_id",
            "course_title",
            "amount",
            "state",
            "instructor_share",
            "platform_share",
            "resolution_reason",
            "admin_reviewed_at",
            "resolved_at",
            "version",
            "created_at",
        ]
        read_only_fields = fields


class EscrowTransactionDetailSerializer(EscrowTransactionSerializer):
    transitions = EscrowTransitionSerializer(many=True, read_only=True)

    class Meta(EscrowTransactionSerializer.Meta):
        fields = EscrowTransactionSerializer.Meta.fields + ["transitions"]
        read_only_fields = fields


class TransactionActionSerializer(serializers.Serializer):
    """
    Request body for resolving a transaction.

    Fields:
        action: approve / decline / refund (admin), accept / decline (instructor)
        reason: Optional free text stored with declines and refunds
        version: Optional optimistic-locking version
    """

    action = serializers.ChoiceField(choices=["approve", "decline", "refund", "accept"])
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)
    version = serializers.IntegerField(required=False, min_value=1)


class ArchiveResultSerializer(serializers.Serializer):
    archived = serializers.IntegerField(read_only=True)
