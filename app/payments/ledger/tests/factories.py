"""
Factory Boy factories for ledger test data.

This module provides factories for creating test instances of ledger models.
Factories write balances directly; use LedgerService.open_account() when a
test needs the balance backed by entries.

Usage:
    from payments.ledger.tests.factories import LedgerAccountFactory

    # User bank account with secret "s3cret"
    account = LedgerAccountFactory(balance=900)

    # Account with a specific secret
    account = LedgerAccountFactory(secret="other")
"""

import uuid

import factory
from django.contrib.auth.hashers import make_password

from payments.ledger.models import AccountType, EntryType, LedgerAccount, LedgerEntry


class LedgerAccountFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating LedgerAccount instances.

    Default creates a USER_BALANCE account with a unique owner_id, a unique
    account number and the secret "s3cret".
    """

    class Meta:
        model = LedgerAccount
        skip_postgeneration_save = True

    class Params:
        secret = "s3cret"

    type = AccountType.USER_BALANCE
    owner_id = factory.LazyFunction(uuid.uuid4)
    account_number = factory.Sequence(lambda n: f"ACC-{n:05d}")
    secret_hash = factory.LazyAttribute(lambda o: make_password(o.secret))
    balance = 0
    allow_negative = False
    is_active = True


class LedgerEntryFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating LedgerEntry instances.

    Does not touch account balances.
    """

    class Meta:
        model = LedgerEntry

    debit_account = factory.SubFactory(LedgerAccountFactory)
    credit_account = factory.SubFactory(LedgerAccountFactory)
    amount = 100
    entry_type = EntryType.REFUND
    idempotency_key = factory.Sequence(lambda n: f"test-entry-{n}")
