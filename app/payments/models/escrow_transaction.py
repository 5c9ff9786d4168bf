"""
EscrowTransaction and EscrowTransitionLog models.

EscrowTransaction is one learner purchase of one course, tracked from the
moment the learner's money enters platform escrow until it is paid out
or refunded. EscrowTransitionLog keeps an append-only history of every
state change with the acting caller.

Usage:
    from payments.models import EscrowTransaction
    from payments.state_machines import EscrowState

    tx = EscrowTransaction.objects.create(
        learner=learner,
        instructor=course.instructor,
        course=course,
        course_title=course.title,
        amount=course.price,
    )

    # State transitions using django-fsm
    tx.admin_approve()  # pending_admin -> pending_instructor
    tx.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin, VersionedMixin
from core.models import BaseModel

from payments.state_machines import EscrowState


class EscrowTransaction(UUIDPrimaryKeyMixin, VersionedMixin, MetadataMixin, BaseModel):
    """
    A purchase whose money is held in platform escrow until resolved.

    State Flow:
        PENDING_ADMIN -> PENDING_INSTRUCTOR -> COMPLETED

    Decline / Refund Flow:
        PENDING_ADMIN -> DECLINED | REFUNDED
        PENDING_INSTRUCTOR -> DECLINED

    Fields:
        learner: Buyer; funds were debited from their bank at creation
        instructor: Course owner at purchase time (snapshot)
        course: Purchased course; NULL once the course is deleted
        course_title: Title at purchase time (snapshot)
        amount: Price at purchase time (snapshot), whole units
        state: Current FSM state
        instructor_share / platform_share: Split recorded on completion
        admin_reviewed_at: When the admin approved or declined
        resolved_at: When the transaction reached a terminal state
        resolution_reason: Free text given with a decline or refund
        archived_by_*: Per-actor "clear history" flags
        version: Optimistic locking version (VersionedMixin)
        metadata: Flexible JSON storage (MetadataMixin)

    Note:
        state is protected; never assign it directly and never call a
        full refresh_from_db() on an instance.
    """

    # ==========================================================================
    # Parties
    # ==========================================================================

    learner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="purchases",
        help_text="Learner who bought the course",
    )
    instructor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="sales",
        help_text="Instructor who owned the course at purchase time",
    )
    course = models.ForeignKey(
        "courses.Course",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
        help_text="Purchased course (NULL if the course was deleted)",
    )

    # ==========================================================================
    # Snapshots & Amounts
    # ==========================================================================

    course_title = models.CharField(
        max_length=200,
        help_text="Course title at purchase time",
    )
    amount = models.PositiveBigIntegerField(
        help_text="Course price at purchase time, in whole units",
    )
    instructor_share = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Amount paid to the instructor on completion",
    )
    platform_share = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Amount kept as platform revenue on completion",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    state = FSMField(
        default=EscrowState.PENDING_ADMIN,
        choices=EscrowState.choices,
        db_index=True,
        protected=True,
        help_text="Current state of the transaction (managed by FSM)",
    )

    # ==========================================================================
    # State Timestamps
    # ==========================================================================

    admin_reviewed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When an admin approved or declined the purchase",
    )
    resolved_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the transaction reached a terminal state",
    )
    resolution_reason = models.TextField(
        blank=True,
        default="",
        help_text="Reason given with a decline or refund",
    )

    # ==========================================================================
    # History Archiving
    # ==========================================================================

    archived_by_admin = models.BooleanField(default=False)
    archived_by_instructor = models.BooleanField(default=False)
    archived_by_learner = models.BooleanField(default=False)

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Escrow Transaction"
        verbose_name_plural = "Escrow Transactions"
        indexes = [
            models.Index(fields=["state", "created_at"], name="escrow_state_created_idx"),
            models.Index(fields=["learner", "state"], name="escrow_learner_state_idx"),
            models.Index(fields=["instructor", "state"], name="escrow_instructor_state_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="escrow_transaction_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"EscrowTransaction({self.id}, {self.state}, {self.amount})"

    @property
    def is_terminal(self) -> bool:
        return self.state in EscrowState.terminal()

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=EscrowState.PENDING_ADMIN,
        target=EscrowState.PENDING_INSTRUCTOR,
    )
    def admin_approve(self):
        """
        Admin forwards the purchase to the instructor.

        Transition: PENDING_ADMIN -> PENDING_INSTRUCTOR
        Funds stay in escrow.
        """
        self.admin_reviewed_at = timezone.now()

    @transition(
        field=state,
        source=EscrowState.PENDING_ADMIN,
        target=EscrowState.DECLINED,
    )
    def admin_decline(self, reason: str = ""):
        """
        Admin rejects the purchase.

        Transition: PENDING_ADMIN -> DECLINED
        The learner is refunded in full by the service.
        """
        now = timezone.now()
        self.admin_reviewed_at = now
        self.resolved_at = now
        self.resolution_reason = reason

    @transition(
        field=state,
        source=EscrowState.PENDING_ADMIN,
        target=EscrowState.REFUNDED,
    )
    def refund(self, reason: str = ""):
        """
        Cancel an unreviewed purchase.

        Transition: PENDING_ADMIN -> REFUNDED
        The learner is refunded in full by the service.
        """
        self.resolved_at = timezone.now()
        self.resolution_reason = reason

    @transition(
        field=state,
        source=EscrowState.PENDING_INSTRUCTOR,
        target=EscrowState.COMPLETED,
    )
    def instructor_accept(self, instructor_share: int, platform_share: int):
        """
        Instructor accepts the sale.

        Transition: PENDING_INSTRUCTOR -> COMPLETED
        Escrow pays instructor_share to the instructor and platform_share
        to platform revenue.
        """
        self.instructor_share = instructor_share
        self.platform_share = platform_share
        self.resolved_at = timezone.now()

    @transition(
        field=state,
        source=EscrowState.PENDING_INSTRUCTOR,
        target=EscrowState.DECLINED,
    )
    def instructor_decline(self, reason: str = ""):
        """
        Instructor rejects the sale.

        Transition: PENDING_INSTRUCTOR -> DECLINED
        The learner is refunded in full by the service.
        """
        self.resolved_at = timezone.now()
        self.resolution_reason = reason


class EscrowTransitionLog(UUIDPrimaryKeyMixin, models.Model):
    """
    Append-only history of EscrowTransaction state changes.

    The first row of a transaction has from_state NULL (creation). Rows
    are written in the same database transaction as the state change and
    the ledger entries, so the log never disagrees with the balances.
    """

    transaction = models.ForeignKey(
        EscrowTransaction,
        on_delete=models.CASCADE,
        related_name="transitions",
    )
    from_state = models.CharField(
        max_length=30,
        choices=EscrowState.choices,
        null=True,
        blank=True,
    )
    to_state = models.CharField(
        max_length=30,
        choices=EscrowState.choices,
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="User who caused the change (NULL for operator tooling)",
    )
    actor_role = models.CharField(max_length=20)
    reason = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Escrow Transition"
        verbose_name_plural = "Escrow Transitions"

    def __str__(self) -> str:
        return f"{self.from_state or '-'} -> {self.to_state}"
