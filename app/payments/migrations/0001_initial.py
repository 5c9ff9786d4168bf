import uuid

import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models

ESCROW_STATES = [
    ("pending_admin", "Pending Admin Review"),
    ("pending_instructor", "Pending Instructor Review"),
    ("completed", "Completed"),
    ("declined", "Declined"),
    ("refunded", "Refunded"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("courses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="LedgerAccount",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="Timestamp when this record was last modified"
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("user_balance", "User Balance"),
                            ("platform_escrow", "Platform Escrow"),
                            ("platform_revenue", "Platform Revenue"),
                            ("platform_treasury", "Platform Treasury"),
                        ],
                        help_text="Category of this account",
                        max_length=50,
                    ),
                ),
                (
                    "owner_id",
                    models.UUIDField(
                        blank=True,
                        db_index=True,
                        help_text="UUID of the user that owns this account",
                        null=True,
                    ),
                ),
                (
                    "account_number",
                    models.CharField(
                        blank=True,
                        help_text="Account number chosen at setup",
                        max_length=64,
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "secret_hash",
                    models.CharField(blank=True, help_text="Hashed account secret", max_length=128),
                ),
                (
                    "balance",
                    models.BigIntegerField(default=0, help_text="Current balance in whole units"),
                ),
                (
                    "allow_negative",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this account can have a negative balance",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True, default=True, help_text="Whether this account is active"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["type", "is_active"], name="ledger_acct_type_active_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("owner_id__isnull", False)),
                        fields=("owner_id",),
                        name="unique_ledger_account_per_owner",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("owner_id__isnull", True)),
                        fields=("type",),
                        name="unique_system_account_per_type",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("balance__gte", 0), ("allow_negative", True), _connector="OR"
                        ),
                        name="ledger_account_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this entry was recorded",
                    ),
                ),
                (
                    "amount",
                    models.PositiveBigIntegerField(
                        help_text="Amount in whole units (always positive)"
                    ),
                ),
                (
                    "entry_type",
                    models.CharField(
                        choices=[
                            ("opening_bonus", "Opening Bonus"),
                            ("purchase_escrowed", "Purchase Escrowed"),
                            ("instructor_payout", "Instructor Payout"),
                            ("fee_collected", "Fee Collected"),
                            ("refund", "Refund"),
                            ("approval_incentive", "Approval Incentive"),
                        ],
                        help_text="Category of this entry",
                        max_length=50,
                    ),
                ),
                (
                    "reference_id",
                    models.UUIDField(
                        blank=True, help_text="UUID of related business entity", null=True
                    ),
                ),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        help_text="Type of related entity (e.g., 'escrow_transaction')",
                        max_length=50,
                        null=True,
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        help_text="Human-readable description of this entry",
                        null=True,
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Arbitrary JSON data for extensibility",
                    ),
                ),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of the caller that created this entry",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "idempotency_key",
                    models.CharField(
                        help_text="Unique key to prevent duplicate entries",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "credit_account",
                    models.ForeignKey(
                        help_text="Account money is added to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_entries",
                        to="payments.ledgeraccount",
                    ),
                ),
                (
                    "debit_account",
                    models.ForeignKey(
                        help_text="Account money is taken from",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="debit_entries",
                        to="payments.ledgeraccount",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "ledger entries",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["reference_type", "reference_id"],
                        name="ledger_entry_reference_idx",
                    ),
                    models.Index(fields=["entry_type"], name="ledger_entry_type_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_entry_amount_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="EscrowTransaction",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="Timestamp when this record was last modified"
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Flexible key-value metadata storage",
                    ),
                ),
                (
                    "version",
                    models.PositiveIntegerField(default=1, help_text="Optimistic locking version"),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "course_title",
                    models.CharField(help_text="Course title at purchase time", max_length=200),
                ),
                (
                    "amount",
                    models.PositiveBigIntegerField(
                        help_text="Course price at purchase time, in whole units"
                    ),
                ),
                (
                    "instructor_share",
                    models.PositiveBigIntegerField(
                        blank=True,
                        help_text="Amount paid to the instructor on completion",
                        null=True,
                    ),
                ),
                (
                    "platform_share",
                    models.PositiveBigIntegerField(
                        blank=True,
                        help_text="Amount kept as platform revenue on completion",
                        null=True,
                    ),
                ),
                (
                    "state",
                    django_fsm.FSMField(
                        choices=ESCROW_STATES,
                        db_index=True,
                        default="pending_admin",
                        help_text="Current state of the transaction (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                (
                    "admin_reviewed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When an admin approved or declined the purchase",
                        null=True,
                    ),
                ),
                (
                    "resolved_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the transaction reached a terminal state",
                        null=True,
                    ),
                ),
                (
                    "resolution_reason",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Reason given with a decline or refund",
                    ),
                ),
                ("archived_by_admin", models.BooleanField(default=False)),
                ("archived_by_instructor", models.BooleanField(default=False)),
                ("archived_by_learner", models.BooleanField(default=False)),
                (
                    "course",
                    models.ForeignKey(
                        blank=True,
                        help_text="Purchased course (NULL if the course was deleted)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="courses.course",
                    ),
                ),
                (
                    "instructor",
                    models.ForeignKey(
                        help_text="Instructor who owned the course at purchase time",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "learner",
                    models.ForeignKey(
                        help_text="Learner who bought the course",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Escrow Transaction",
                "verbose_name_plural": "Escrow Transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["state", "created_at"], name="escrow_state_created_idx"),
                    models.Index(fields=["learner", "state"], name="escrow_learner_state_idx"),
                    models.Index(
                        fields=["instructor", "state"], name="escrow_instructor_state_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="escrow_transaction_amount_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="EscrowTransitionLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "from_state",
                    models.CharField(blank=True, choices=ESCROW_STATES, max_length=30, null=True),
                ),
                ("to_state", models.CharField(choices=ESCROW_STATES, max_length=30)),
                ("actor_role", models.CharField(max_length=20)),
                ("reason", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who caused the change (NULL for operator tooling)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transitions",
                        to="payments.escrowtransaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "Escrow Transition",
                "verbose_name_plural": "Escrow Transitions",
                "ordering": ["created_at"],
            },
        ),
    ]
