"""
Tests for ledger models.

Covers secret hashing, database constraints and the entries-based
balance used for reconciliation.
"""

import pytest
from django.db import IntegrityError, transaction

from payments.ledger.models import AccountType, LedgerAccount
from payments.ledger.tests.factories import LedgerAccountFactory, LedgerEntryFactory


class TestLedgerAccountSecret:
    def test_secret_is_stored_hashed(self, db):
        account = LedgerAccountFactory(secret="s3cret")

        assert account.secret_hash != "s3cret"
        assert account.check_secret("s3cret") is True

    def test_wrong_secret_fails(self, db):
        account = LedgerAccountFactory(secret="s3cret")

        assert account.check_secret("nope") is False

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_secret_fails(self, db, value):
        account = LedgerAccountFactory()

        assert account.check_secret(value) is False

    def test_account_without_hash_never_matches(self, db):
        account = LedgerAccountFactory(secret_hash="")

        assert account.check_secret("anything") is False


class TestLedgerAccountConstraints:
    def test_balance_cannot_go_negative(self, db):
        """
        Given a user account that does not allow negative balances
        When a negative balance is written directly
        Then the database check constraint rejects it
        """
        account = LedgerAccountFactory()
        account.balance = -1

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                account.save()

    def test_negative_allowed_when_flagged(self, db):
        account = LedgerAccountFactory(allow_negative=True)
        account.balance = -500
        account.save()

        assert LedgerAccount.objects.get(id=account.id).balance == -500

    def test_one_account_per_owner(self, db):
        account = LedgerAccountFactory()

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LedgerAccountFactory(owner_id=account.owner_id)

    def test_one_system_account_per_type(self, db):
        LedgerAccountFactory(
            type=AccountType.PLATFORM_ESCROW,
            owner_id=None,
            account_number=None,
        )

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LedgerAccountFactory(
                    type=AccountType.PLATFORM_ESCROW,
                    owner_id=None,
                    account_number=None,
                )


class TestLedgerEntry:
    def test_amount_must_be_positive(self, db):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LedgerEntryFactory(amount=0)

    def test_idempotency_key_is_unique(self, db):
        LedgerEntryFactory(idempotency_key="same")

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LedgerEntryFactory(idempotency_key="same")


class TestEntriesBalance:
    def test_credits_minus_debits(self, db):
        account = LedgerAccountFactory()
        LedgerEntryFactory(credit_account=account, amount=700)
        LedgerEntryFactory(credit_account=account, amount=300)
        LedgerEntryFactory(debit_account=account, amount=250)

        assert account.get_entries_balance() == 750

    def test_zero_without_entries(self, db):
        assert LedgerAccountFactory().get_entries_balance() == 0
