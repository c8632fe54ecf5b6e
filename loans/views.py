import logging
from datetime import date

from django.db.models import Q
from rest_framework import generics, serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from loans.models import Loan
from loans.serializers import LoanSerializer, LoanRejectSerializer, OverdueLoanSerializer
from accounts.permissions import (
    IsSystemAdmin,
    IsSystemAdminOrReadOnly,
    IsSystemAdminOrOwnMember,
)

logger = logging.getLogger(__name__)


class LoanListCreateView(generics.ListCreateAPIView):
    serializer_class = LoanSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = Loan.objects.select_related("member", "loan_type").prefetch_related(
            "collaterals"
        )
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)

        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status__in=params["status"].split(","))
        if params.get("member"):
            queryset = queryset.filter(member__member_no=params["member"])
        if params.get("school"):
            queryset = queryset.filter(member__school__reference=params["school"])
        return queryset

    def perform_create(self, serializer):
        loan = serializer.save(created_by=self.request.user)
        logger.info(
            f"Created loan {loan.account_number} of {loan.principal_amount} for {loan.member.member_no}"
        )


class LoanDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Loan.objects.select_related("member", "loan_type")
    serializer_class = LoanSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.repayments.exists():
            raise serializers.ValidationError(
                {"detail": "Cannot delete a loan with existing repayments."}
            )
        if instance.interest_charges.exists():
            raise serializers.ValidationError(
                {"detail": "Cannot delete a loan with posted interest charges."}
            )
        logger.info(f"Deleted loan {instance.account_number}")
        instance.delete()


class LoanApproveView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request, reference):
        try:
            loan = Loan.objects.get(reference=reference)
        except Loan.DoesNotExist:
            return Response(
                {"detail": "Loan not found."}, status=status.HTTP_404_NOT_FOUND
            )
        loan.approve(request.user)
        logger.info(f"Approved loan {loan.account_number}")
        return Response(LoanSerializer(loan).data, status=status.HTTP_200_OK)


class LoanRejectView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request, reference):
        try:
            loan = Loan.objects.get(reference=reference)
        except Loan.DoesNotExist:
            return Response(
                {"detail": "Loan not found."}, status=status.HTTP_404_NOT_FOUND
            )
        serializer = LoanRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        loan.reject(serializer.validated_data["reason"], request.user)
        logger.info(f"Rejected loan {loan.account_number}")
        return Response(LoanSerializer(loan).data, status=status.HTTP_200_OK)


class OverdueLoanListView(generics.ListAPIView):
    """
    Loans marked overdue plus active loans whose due date has passed,
    oldest due date first. Optional ?school=<reference> filter.
    """

    serializer_class = OverdueLoanSerializer
    permission_classes = [
        IsSystemAdmin,
    ]

    def get_queryset(self):
        queryset = Loan.objects.filter(
            Q(status=Loan.OVERDUE)
            | Q(status=Loan.ACTIVE, next_due_date__lt=date.today())
        ).select_related("member", "member__school", "loan_type")
        school = self.request.query_params.get("school")
        if school:
            queryset = queryset.filter(member__school__reference=school)
        return queryset.order_by("next_due_date")
