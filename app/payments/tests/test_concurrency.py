"""
Tests for escrow operations running on several threads at once.

These need real commits (transaction=True) so every thread works on its
own database connection, as concurrent requests do.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection
from django.db.models import Sum

from authentication.context import CallerContext
from authentication.tests.factories import AdminFactory, LearnerFactory
from core.exceptions import BaseApplicationError
from courses.tests.factories import ApprovedCourseFactory
from payments.exceptions import InvalidStateTransitionError
from payments.ledger.models import AccountType, EntryType, LedgerAccount, LedgerEntry
from payments.ledger.services import LedgerService
from payments.models import EscrowTransaction
from payments.services import EscrowService
from payments.state_machines import EscrowState
from payments.tests.conftest import LEARNER_SECRET


def _caller(user):
    return CallerContext(id=user.id, role=user.role)


def _run_concurrently(*calls):
    """
    Start every call at the same moment on its own thread.

    Returns each call's result, or the application error it raised, in
    call order. Any other exception fails the test.
    """
    barrier = threading.Barrier(len(calls))

    def run(call):
        connection.close()  # Force new connection for thread
        try:
            barrier.wait(timeout=10)
            return call()
        except BaseApplicationError as exc:
            return exc
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(calls)) as executor:
        futures = [executor.submit(run, call) for call in calls]
        return [future.result() for future in futures]


@pytest.mark.django_db(transaction=True)
class TestConcurrentEscrow:
    def test_learners_buy_at_the_same_time(self, instructor, settings):
        """
        Given two learners with 5000 each and two approved courses
        When both learners buy at the same moment
        Then both purchases are escrowed and no money is lost
        """
        # Arrange
        settings.LEDGER_OPENING_BONUS = 5000
        buyers = []
        for index in range(2):
            learner = LearnerFactory()
            LedgerService.open_account(learner.id, f"LRN-{index}", LEARNER_SECRET)
            course = ApprovedCourseFactory(instructor=instructor, price=1000)
            buyers.append((_caller(learner), course.id))

        # Act
        results = _run_concurrently(
            *[
                lambda caller=caller, course_id=course_id: EscrowService.initiate_purchase(
                    caller, course_id, LEARNER_SECRET
                )
                for caller, course_id in buyers
            ]
        )

        # Assert
        assert [tx.state for tx in results] == [EscrowState.PENDING_ADMIN] * 2
        for caller, _ in buyers:
            assert LedgerService.get_balance(caller.id) == 4000
        assert LedgerService.get_system_account(AccountType.PLATFORM_ESCROW).balance == 2000
        assert LedgerAccount.objects.aggregate(total=Sum("balance"))["total"] == 0

    def test_admins_decline_the_same_purchase(self, learner, instructor, settings):
        """
        Given one purchase waiting for review
        When two admins decline it at the same moment
        Then one decline wins, the other is rejected, and the learner is
        refunded exactly once
        """
        # Arrange
        settings.LEDGER_OPENING_BONUS = 5000
        LedgerService.open_account(learner.id, "LRN-0001", LEARNER_SECRET)
        course = ApprovedCourseFactory(instructor=instructor, price=1000)
        tx = EscrowService.initiate_purchase(_caller(learner), course.id, LEARNER_SECRET)
        admins = [_caller(AdminFactory()) for _ in range(2)]

        # Act
        results = _run_concurrently(
            *[lambda admin=admin: EscrowService.admin_decline(admin, tx.id) for admin in admins]
        )

        # Assert
        declined = [r for r in results if isinstance(r, EscrowTransaction)]
        rejected = [r for r in results if isinstance(r, InvalidStateTransitionError)]
        assert len(declined) == 1
        assert len(rejected) == 1
        assert EscrowTransaction.objects.get(id=tx.id).state == EscrowState.DECLINED
        refunds = LedgerEntry.objects.filter(reference_id=tx.id, entry_type=EntryType.REFUND)
        assert refunds.count() == 1
        assert LedgerService.get_balance(learner.id) == 5000
