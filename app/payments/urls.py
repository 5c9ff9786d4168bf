"""
URL configuration for payments app.

URL structure:
    /api/v1/payments/accounts/                      - Open bank account
    /api/v1/payments/accounts/me/                   - Balance
    /api/v1/payments/accounts/me/entries/           - Bank statement
    /api/v1/payments/purchases/                     - Buy a course
    /api/v1/payments/transactions/                  - Transaction list
    /api/v1/payments/transactions/history/          - Archive terminal history
    /api/v1/payments/transactions/{id}/             - Transaction detail
    /api/v1/payments/transactions/{id}/entries/     - Ledger entries of a transaction
    /api/v1/payments/transactions/{id}/action/      - Approve / decline / refund / accept
"""

from django.urls import path

from payments import views

app_name = "payments"

urlpatterns = [
    path("accounts/", views.BankAccountView.as_view(), name="account-create"),
    path("accounts/me/", views.MyBankAccountView.as_view(), name="account-me"),
    path("accounts/me/entries/", views.MyBankStatementView.as_view(), name="account-entries"),
    path("purchases/", views.PurchaseView.as_view(), name="purchase-create"),
    path("transactions/", views.TransactionListView.as_view(), name="transaction-list"),
    path(
        "transactions/history/",
        views.TransactionHistoryView.as_view(),
        name="transaction-history",
    ),
    path(
        "transactions/<uuid:transaction_id>/",
        views.TransactionDetailView.as_view(),
        name="transaction-detail",
    ),
    path(
        "transactions/<uuid:transaction_id>/entries/",
        views.TransactionEntriesView.as_view(),
        name="transaction-entries",
    ),
    path(
        "transactions/<uuid:transaction_id>/action/",
        views.TransactionActionView.as_view(),
        name="transaction-action",
    ),
]
