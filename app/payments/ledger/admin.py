"""
Django admin configuration for ledger models.

Key features:
- LedgerEntry is immutable (no add/edit/delete permissions)
- Stored balance shown next to the balance recomputed from entries
- The secret hash is never displayed
"""

from django.contrib import admin

from .models import LedgerAccount, LedgerEntry


@admin.register(LedgerAccount)
class LedgerAccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for LedgerAccount.

    Balances change only through LedgerService, so they are read-only here.
    Operators may toggle is_active to freeze an account.
    """

    list_display = [
        "account_number",
        "type",
        "owner_id",
        "balance",
        "is_active",
        "allow_negative",
        "created_at",
    ]
    list_filter = ["type", "is_active", "allow_negative"]
    search_fields = ["id", "owner_id", "account_number"]
    readonly_fields = [
        "id",
        "type",
        "owner_id",
        "account_number",
        "balance",
        "allow_negative",
        "entries_balance_display",
        "created_at",
        "updated_at",
    ]
    exclude = ["secret_hash"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "type", "owner_id", "account_number"),
            },
        ),
        (
            "Configuration",
            {
                "fields": ("allow_negative", "is_active"),
            },
        ),
        (
            "Balance",
            {
                "fields": ("balance", "entries_balance_display"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Balance from entries")
    def entries_balance_display(self, obj: LedgerAccount) -> int:
        return obj.get_entries_balance()

    def has_add_permission(self, request) -> bool:
        return False


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """
    Admin configuration for LedgerEntry.

    Ledger entries are immutable - they cannot be added, edited or
    deleted through the admin interface.
    """

    list_display = [
        "id",
        "created_at",
        "entry_type",
        "amount",
        "debit_account",
        "credit_account",
        "reference_type",
        "created_by",
    ]
    list_filter = ["entry_type", "reference_type", "created_at"]
    search_fields = [
        "id",
        "idempotency_key",
        "reference_id",
        "description",
        "created_by",
    ]
    readonly_fields = [
        "id",
        "created_at",
        "debit_account",
        "credit_account",
        "amount",
        "entry_type",
        "reference_id",
        "reference_type",
        "description",
        "metadata",
        "created_by",
        "idempotency_key",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            "Entry Details",
            {
                "fields": ("id", "entry_type", "amount", "created_at"),
            },
        ),
        (
            "Accounts",
            {
                "fields": ("debit_account", "credit_account"),
            },
        ),
        (
            "Reference",
            {
                "fields": ("reference_type", "reference_id", "idempotency_key"),
            },
        ),
        (
            "Additional Info",
            {
                "fields": ("description", "metadata", "created_by"),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False
