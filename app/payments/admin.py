"""
Payment admin configuration.

This file imports admin configurations from the ledger submodule
and registers escrow models with the Django admin.

Escrow transactions are read-only here: state changes and money
movements go through EscrowService (API or refund_stale_transactions).
"""

from django.contrib import admin

from payments.ledger.admin import LedgerAccountAdmin, LedgerEntryAdmin
from payments.models import EscrowTransaction, EscrowTransitionLog

__all__ = [
    "LedgerAccountAdmin",
    "LedgerEntryAdmin",
    "EscrowTransactionAdmin",
]


class EscrowTransitionInline(admin.TabularInline):
    model = EscrowTransitionLog
    extra = 0
    can_delete = False
    fields = ["created_at", "from_state", "to_state", "actor", "actor_role", "reason"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(EscrowTransaction)
class EscrowTransactionAdmin(admin.ModelAdmin):
    """
    Admin configuration for EscrowTransaction.

    Provides visibility into purchases, their states and transition
    history.
    """

    list_display = [
        "id",
        "course_title",
        "learner",
        "instructor",
        "amount",
        "state",
        "created_at",
    ]
    list_filter = ["state", "created_at"]
    search_fields = ["id", "course_title", "learner__email", "instructor__email"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    inlines = [EscrowTransitionInline]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "state", "learner", "instructor", "course", "course_title"),
            },
        ),
        (
            "Amount",
            {
                "fields": ("amount", "instructor_share", "platform_share"),
            },
        ),
        (
            "Resolution",
            {
                "fields": ("admin_reviewed_at", "resolved_at", "resolution_reason"),
            },
        ),
        (
            "History",
            {
                "fields": ("archived_by_admin", "archived_by_instructor", "archived_by_learner"),
                "classes": ("collapse",),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("metadata", "version"),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
