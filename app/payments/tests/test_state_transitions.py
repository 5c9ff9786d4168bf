"""
Tests for EscrowTransaction state machine transitions using django-fsm.
"""

import pytest
from django_fsm import TransitionNotAllowed

from payments.models import EscrowTransaction
from payments.state_machines import EscrowState
from payments.tests.factories import EscrowTransactionFactory


class TestEscrowTransactionTransitions:
    """Tests for EscrowTransaction state machine transitions."""

    # -------------------------------------------------------------------------
    # Valid Transitions
    # -------------------------------------------------------------------------

    def test_admin_approve(self, db):
        """Should move pending_admin to pending_instructor."""
        tx = EscrowTransactionFactory()

        tx.admin_approve()
        tx.save()

        assert tx.state == EscrowState.PENDING_INSTRUCTOR
        assert tx.admin_reviewed_at is not None
        assert tx.resolved_at is None

    def test_admin_decline(self, db):
        """Should move pending_admin to declined and record the reason."""
        tx = EscrowTransactionFactory()

        tx.admin_decline(reason="Suspicious")

        assert tx.state == EscrowState.DECLINED
        assert tx.resolution_reason == "Suspicious"
        assert tx.resolved_at is not None

    def test_refund(self, db):
        """Should move pending_admin to refunded."""
        tx = EscrowTransactionFactory()

        tx.refund(reason="stale")

        assert tx.state == EscrowState.REFUNDED
        assert tx.is_terminal

    def test_instructor_accept_records_shares(self, db):
        """Should move pending_instructor to completed with the split."""
        tx = EscrowTransactionFactory(state=EscrowState.PENDING_INSTRUCTOR)

        tx.instructor_accept(instructor_share=600, platform_share=400)

        assert tx.state == EscrowState.COMPLETED
        assert (tx.instructor_share, tx.platform_share) == (600, 400)

    def test_instructor_decline(self, db):
        """Should move pending_instructor to declined."""
        tx = EscrowTransactionFactory(state=EscrowState.PENDING_INSTRUCTOR)

        tx.instructor_decline(reason="Not my course")

        assert tx.state == EscrowState.DECLINED

    # -------------------------------------------------------------------------
    # Invalid Transitions
    # -------------------------------------------------------------------------

    @pytest.mark.parametrize(
        "state",
        [EscrowState.COMPLETED, EscrowState.DECLINED, EscrowState.REFUNDED],
    )
    def test_terminal_states_are_final(self, db, state):
        """Should not leave a terminal state."""
        tx = EscrowTransactionFactory(state=state)

        for method in (tx.admin_approve, tx.admin_decline, tx.refund, tx.instructor_decline):
            with pytest.raises(TransitionNotAllowed):
                method()

    def test_instructor_cannot_accept_before_admin(self, db):
        """Should not complete a transaction still awaiting the admin."""
        tx = EscrowTransactionFactory()

        with pytest.raises(TransitionNotAllowed):
            tx.instructor_accept(instructor_share=600, platform_share=400)

    def test_refund_after_admin_approval_not_allowed(self, db):
        """Should only refund unreviewed purchases."""
        tx = EscrowTransactionFactory(state=EscrowState.PENDING_INSTRUCTOR)

        with pytest.raises(TransitionNotAllowed):
            tx.refund()

    def test_state_is_protected(self, db):
        """Should reject direct assignment to state."""
        tx = EscrowTransactionFactory()

        with pytest.raises(AttributeError):
            tx.state = EscrowState.COMPLETED


class TestEscrowStateGroups:
    def test_live_states_block_repurchase(self):
        assert EscrowState.REFUNDED not in EscrowState.live()
        assert EscrowState.DECLINED not in EscrowState.live()
        assert EscrowState.COMPLETED in EscrowState.live()

    def test_only_completed_and_declined_are_archivable(self):
        assert set(EscrowState.archivable()) == {EscrowState.COMPLETED, EscrowState.DECLINED}


def test_snapshot_survives_course_deletion(db):
    tx = EscrowTransactionFactory()
    title = tx.course_title

    tx.course.delete()

    stored = EscrowTransaction.objects.get(id=tx.id)
    assert stored.course_id is None
    assert stored.course_title == title
