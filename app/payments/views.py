"""
API views for payments.

Provides:
- BankAccountView: Open a bank account (opening bonus included)
- MyBankAccountView: Caller's account number and balance
- MyBankStatementView: Caller's latest ledger entries
- PurchaseView: Buy a course (learner)
- TransactionListView: Caller's transactions (admins see all)
- TransactionDetailView: One transaction with its transition history
- TransactionEntriesView: Ledger entries of one transaction
- TransactionActionView: Admin and instructor resolution of transactions
- TransactionHistoryView: Archive the caller's terminal history

Errors raised by the service layer (BaseApplicationError subclasses) are
rendered by core.exception_handler.api_exception_handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.context import resolve_caller
from authentication.permissions import IsLearner
from core.exceptions import PermissionDeniedError
from payments.ledger import LedgerService
from payments.serializers import (
    AccountSummarySerializer,
    ArchiveResultSerializer,
    BankAccountCreateSerializer,
    EscrowTransactionDetailSerializer,
    EscrowTransactionSerializer,
    LedgerEntrySerializer,
    PurchaseCreateSerializer,
    TransactionActionSerializer,
)
from payments.services import EscrowService


class BankAccountView(APIView):
    """
    POST /api/v1/payments/accounts/

    Request:
        {"account_number": "ACC-1001", "secret": "..."}

    Response:
        201 Created: {"account_number": "ACC-1001", "balance": 5000}
        400 Bad Request: Blank account number or secret
        409 Conflict: Account already set up, or number taken
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Set up bank account",
        request=BankAccountCreateSerializer,
        responses={
            201: AccountSummarySerializer,
            409: OpenApiResponse(description="Account already exists"),
        },
        tags=["Payments - Bank"],
    )
    def post(self, request):
        serializer = BankAccountCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        caller = resolve_caller(request.user)
        LedgerService.open_account(
            caller.id,
            serializer.validated_data["account_number"],
            serializer.validated_data["secret"],
        )
        summary = LedgerService.get_account_summary(caller.id)
        return Response(AccountSummarySerializer(summary).data, status=status.HTTP_201_CREATED)


class MyBankAccountView(APIView):
    """GET /api/v1/payments/accounts/me/ - Account number and balance."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get bank balance",
        responses={
            200: AccountSummarySerializer,
            404: OpenApiResponse(description="No bank account set up"),
        },
        tags=["Payments - Bank"],
    )
    def get(self, request):
        caller = resolve_caller(request.user)
        summary = LedgerService.get_account_summary(caller.id)
        return Response(AccountSummarySerializer(summary).data)


class MyBankStatementView(APIView):
    """GET /api/v1/payments/accounts/me/entries/ - Latest movements of the caller's account."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get bank statement",
        responses={
            200: LedgerEntrySerializer(many=True),
            404: OpenApiResponse(description="No bank account set up"),
        },
        tags=["Payments - Bank"],
    )
    def get(self, request):
        caller = resolve_caller(request.user)
        account = LedgerService.get_account_for_owner(caller.id)
        entries = LedgerService.get_entries_for_account(account.id)
        serializer = LedgerEntrySerializer(entries, many=True, context={"account_id": account.id})
        return Response(serializer.data)


class PurchaseView(APIView):
    """
    POST /api/v1/payments/purchases/

    Request:
        {"course_id": "<uuid>", "secret": "..."}

    Response:
        201 Created: Transaction in pending_admin
        400 Bad Request: Insufficient funds
        403 Forbidden: Not a learner, or wrong bank secret
        404 Not Found: Unknown course, or no bank account
        409 Conflict: Course not approved, or already purchased
    """

    permission_classes = [IsLearner]

    @extend_schema(
        summary="Purchase a course",
        request=PurchaseCreateSerializer,
        responses={
            201: EscrowTransactionSerializer,
            400: OpenApiResponse(description="Insufficient funds"),
            403: OpenApiResponse(description="Invalid bank secret"),
            404: OpenApiResponse(description="Course or bank account not found"),
            409: OpenApiResponse(description="Course not approved or already purchased"),
        },
        tags=["Payments - Purchases"],
    )
    def post(self, request):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tx = EscrowService.initiate_purchase(
            resolve_caller(request.user),
            serializer.validated_data["course_id"],
            serializer.validated_data["secret"],
        )
        return Response(EscrowTransactionSerializer(tx).data, status=status.HTTP_201_CREATED)


class TransactionListView(APIView):
    """GET /api/v1/payments/transactions/ - Caller's transactions, newest first."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List transactions",
        parameters=[
            OpenApiParameter("state", str, description="Filter by state"),
            OpenApiParameter("include_archived", bool, description="Include archived rows"),
        ],
        responses=EscrowTransactionSerializer(many=True),
        tags=["Payments - Transactions"],
    )
    def get(self, request):
        include_archived = request.query_params.get("include_archived", "").lower() in (
            "1",
            "true",
            "yes",
        )
        transactions = EscrowService.list_for_caller(
            resolve_caller(request.user),
            include_archived=include_archived,
            state=request.query_params.get("state") or None,
        )
        return Response(EscrowTransactionSerializer(transactions, many=True).data)


class TransactionDetailView(APIView):
    """GET /api/v1/payments/transactions/{id}/ - Transaction with transition history."""

    permission_classes = [IsAuthenticated]

    @extend_schema(responses=EscrowTransactionDetailSerializer, tags=["Payments - Transactions"])
    def get(self, request, transaction_id):
        tx = EscrowService.get_for_caller(resolve_caller(request.user), transaction_id)
        return Response(EscrowTransactionDetailSerializer(tx).data)


class TransactionEntriesView(APIView):
    """GET /api/v1/payments/transactions/{id}/entries/ - Ledger movements of one transaction."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Audit transaction money movements",
        responses={
            200: LedgerEntrySerializer(many=True),
            404: OpenApiResponse(description="Transaction not found"),
        },
        tags=["Payments - Transactions"],
    )
    def get(self, request, transaction_id):
        entries = EscrowService.get_ledger_entries(resolve_caller(request.user), transaction_id)
        return Response(LedgerEntrySerializer(entries, many=True).data)


class TransactionActionView(APIView):
    """
    POST /api/v1/payments/transactions/{id}/action/

    Admins act on pending_admin transactions (approve / decline / refund);
    instructors act on their own pending_instructor sales (accept / decline).

    Request:
        {"action": "decline", "reason": "Duplicate order", "version": 1}

    Response:
        200 OK: Updated transaction
        403 Forbidden: Action not available to the caller's role
        404 Not Found: Unknown transaction (or not the instructor's sale)
        409 Conflict: Transaction is not in the required state, or stale version
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Resolve a transaction",
        request=TransactionActionSerializer,
        responses={
            200: EscrowTransactionSerializer,
            403: OpenApiResponse(description="Action not allowed for role"),
            404: OpenApiResponse(description="Transaction not found"),
            409: OpenApiResponse(description="Invalid state transition"),
        },
        tags=["Payments - Transactions"],
    )
    def post(self, request, transaction_id):
        serializer = TransactionActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        caller = resolve_caller(request.user)
        action = serializer.validated_data["action"]
        reason = serializer.validated_data["reason"]
        version = serializer.validated_data.get("version")

        if caller.is_admin and action == "approve":
            tx = EscrowService.admin_approve(caller, transaction_id, expected_version=version)
        elif caller.is_admin and action == "decline":
            tx = EscrowService.admin_decline(
                caller, transaction_id, reason=reason, expected_version=version
            )
        elif caller.is_admin and action == "refund":
            tx = EscrowService.admin_refund(
                caller, transaction_id, reason=reason, expected_version=version
            )
        elif caller.is_instructor and action == "accept":
            tx = EscrowService.instructor_accept(caller, transaction_id, expected_version=version)
        elif caller.is_instructor and action == "decline":
            tx = EscrowService.instructor_decline(
                caller, transaction_id, reason=reason, expected_version=version
            )
        else:
            raise PermissionDeniedError(
                f"Action '{action}' is not available for role '{caller.role}'",
                error_code="ACTION_NOT_ALLOWED",
                details={"action": action, "role": caller.role},
            )

        return Response(EscrowTransactionSerializer(tx).data)


class TransactionHistoryView(APIView):
    """DELETE /api/v1/payments/transactions/history/ - Archive completed and declined rows."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Clear transaction history",
        responses=ArchiveResultSerializer,
        tags=["Payments - Transactions"],
    )
    def delete(self, request):
        count = EscrowService.archive_history(resolve_caller(request.user))
        return Response({"archived": count})
