import logging
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from approvals.serializers import (
    PendingTransactionSerializer,
    TransactionKeySerializer,
    RejectTransactionSerializer,
    BulkApproveSerializer,
    BulkRejectSerializer,
)
from approvals.utils import (
    pending_transactions,
    approve_transaction,
    reject_transaction,
    bulk_approve,
    bulk_reject,
)
from accounts.permissions import IsSystemAdmin

logger = logging.getLogger(__name__)


class PendingTransactionListView(APIView):
    """Everything awaiting approval. Optional ?kind= filter."""

    permission_classes = [
        IsSystemAdmin,
    ]

    def get(self, request):
        entries = pending_transactions(request.query_params.get("kind") or None)
        return Response(
            PendingTransactionSerializer(entries, many=True).data,
            status=status.HTTP_200_OK,
        )


class ApproveTransactionView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = TransactionKeySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        obj = approve_transaction(data["kind"], data["reference"], request.user)
        return Response(
            {
                "detail": f"Transaction {obj.reference} approved.",
                "kind": data["kind"],
                "reference": obj.reference,
                "status": obj.status,
            },
            status=status.HTTP_200_OK,
        )


class RejectTransactionView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = RejectTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        obj = reject_transaction(
            data["kind"], data["reference"], data["reason"], request.user
        )
        return Response(
            {
                "detail": f"Transaction {obj.reference} rejected.",
                "kind": data["kind"],
                "reference": obj.reference,
                "status": obj.status,
                "rejection_reason": obj.rejection_reason,
            },
            status=status.HTTP_200_OK,
        )


class BulkApproveView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = BulkApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        approved = bulk_approve(serializer.validated_data["items"], request.user)
        return Response(
            {
                "detail": f"{len(approved)} transactions approved.",
                "references": [obj.reference for obj in approved],
            },
            status=status.HTTP_200_OK,
        )


class BulkRejectView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = BulkRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        rejected = bulk_reject(data["items"], data["reason"], request.user)
        return Response(
            {
                "detail": f"{len(rejected)} transactions rejected.",
                "references": [obj.reference for obj in rejected],
            },
            status=status.HTTP_200_OK,
        )
