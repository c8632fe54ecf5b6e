import logging
from collections import OrderedDict
from decimal import Decimal

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from loanrepayments.models import LoanRepayment
from loanrepayments.serializers import (
    LoanRepaymentSerializer,
    BatchRepaymentSerializer,
)
from loanrepayments.utils import (
    record_repayment,
    record_batch_repayments,
    send_repayment_received_email,
)
from accounts.permissions import (
    IsSystemAdmin,
    IsSystemAdminOrReadOnly,
    IsSystemAdminOrOwnMember,
)

logger = logging.getLogger(__name__)


class LoanRepaymentListCreateView(generics.ListCreateAPIView):
    serializer_class = LoanRepaymentSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = LoanRepayment.objects.select_related("loan", "member", "recorded_by")
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)
        params = self.request.query_params
        if params.get("loan"):
            queryset = queryset.filter(loan__account_number=params["loan"])
        if params.get("member"):
            queryset = queryset.filter(member__member_no=params["member"])
        return queryset

    def perform_create(self, serializer):
        data = serializer.validated_data
        repayment = record_repayment(
            data["loan"],
            data["amount_paid"],
            data["payment_date"],
            deposit_mode=data.get("deposit_mode", "Cash"),
            source_name=data.get("source_name"),
            transaction_reference=data.get("transaction_reference"),
            evidence_url=data.get("evidence_url"),
            notes=data.get("notes"),
            user=self.request.user,
        )
        serializer.instance = repayment
        send_repayment_received_email(repayment)


class LoanRepaymentDetailView(generics.RetrieveAPIView):
    queryset = LoanRepayment.objects.select_related("loan", "member")
    serializer_class = LoanRepaymentSerializer
    permission_classes = [
        IsAuthenticated,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"


class BatchLoanRepaymentView(APIView):
    """Group loan repayments, all-or-nothing."""

    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = BatchRepaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created, skipped = record_batch_repayments(
            serializer.validated_data["repayments"], user=request.user
        )
        for repayment in created:
            send_repayment_received_email(repayment)

        return Response(
            {
                "message": f"Successfully recorded {len(created)} loan repayments.",
                "created_count": len(created),
                "skipped_count": skipped,
                "repayments": LoanRepaymentSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RepaymentsByMemberView(APIView):
    """Repayments grouped per member with totals, members by name."""

    permission_classes = [
        IsSystemAdmin,
    ]

    def get(self, request):
        repayments = LoanRepayment.objects.select_related("loan", "member").order_by(
            "member__full_name", "-payment_date"
        )
        if request.query_params.get("school"):
            repayments = repayments.filter(
                member__school__reference=request.query_params["school"]
            )

        groups = OrderedDict()
        for repayment in repayments:
            member = repayment.member
            group = groups.setdefault(
                member.pk,
                {
                    "member_no": member.member_no,
                    "member_name": member.full_name,
                    "total_repaid": Decimal("0.00"),
                    "repayment_count": 0,
                    "repayments": [],
                },
            )
            group["total_repaid"] += repayment.amount_paid
            group["repayment_count"] += 1
            group["repayments"].append(LoanRepaymentSerializer(repayment).data)

        return Response(list(groups.values()), status=status.HTTP_200_OK)
