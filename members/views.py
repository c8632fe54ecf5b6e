import logging
from decimal import Decimal

from django.db.models import ProtectedError, Q, Sum
from rest_framework import generics, serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from members.models import Member
from members.serializers import (
    MemberSerializer,
    AccountClosureSerializer,
    ClosedMemberSerializer,
)
from members.utils import calculate_final_payout, confirm_account_closure
from accounts.permissions import (
    IsSystemAdmin,
    IsSystemAdminOrReadOnly,
    IsSystemAdminOrOwnMember,
)
from savings.serializers import MemberSavingAccountSerializer
from loans.models import Loan
from loans.serializers import LoanSerializer
from shares.utils import total_share_value
from dividends.models import Dividend

logger = logging.getLogger(__name__)


class MemberListCreateView(generics.ListCreateAPIView):
    serializer_class = MemberSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = Member.objects.select_related(
            "school", "saving_account_type", "address", "emergency_contact"
        ).prefetch_related("share_commitments__share_type")
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            return queryset.filter(pk=user.member_id)

        params = self.request.query_params
        if params.get("school"):
            queryset = queryset.filter(school__reference=params["school"])
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("search"):
            term = params["search"]
            queryset = queryset.filter(
                Q(full_name__icontains=term)
                | Q(member_no__icontains=term)
                | Q(email__icontains=term)
            )
        return queryset

    def perform_create(self, serializer):
        member = serializer.save()
        logger.info(f"Created member {member.member_no} ({member.full_name})")


class MemberDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Member.objects.select_related(
        "school", "saving_account_type", "address", "emergency_contact"
    )
    serializer_class = MemberSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "member_no"

    def perform_destroy(self, instance):
        if instance.loans.filter(status__in=[Loan.ACTIVE, Loan.OVERDUE]).exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete member with active or overdue loans. Please resolve loans first."
                }
            )
        try:
            instance.delete()
        except ProtectedError:
            raise serializers.ValidationError(
                {
                    "detail": "Failed to delete member. They have related records that could not be deleted."
                }
            )
        logger.info(f"Deleted member {instance.member_no}")


class MemberProfileView(APIView):
    """
    Everything about one member: details, savings accounts, loans and totals.
    A member user may only open their own profile.
    """

    permission_classes = [
        IsSystemAdminOrOwnMember,
    ]

    def get(self, request, member_no):
        try:
            member = Member.objects.select_related("school").get(member_no=member_no)
        except Member.DoesNotExist:
            return Response(
                {"detail": "Member not found."}, status=status.HTTP_404_NOT_FOUND
            )
        self.check_object_permissions(request, member)

        accounts = member.savings_accounts.select_related("account_type")
        loans = member.loans.select_related("loan_type")

        outstanding = loans.filter(
            status__in=[Loan.ACTIVE, Loan.OVERDUE]
        ).aggregate(total=Sum("remaining_balance"))["total"] or Decimal("0")
        share_value = total_share_value(member)
        dividends = Dividend.objects.filter(
            member=member, status=Dividend.APPROVED
        ).aggregate(total=Sum("amount"))["total"] or Decimal("0")

        return Response(
            {
                "member": MemberSerializer(member).data,
                "savings_accounts": MemberSavingAccountSerializer(
                    accounts, many=True
                ).data,
                "loans": LoanSerializer(loans, many=True).data,
                "totals": {
                    "savings_balance": member.savings_balance,
                    "shares_count": member.shares_count,
                    "share_value": share_value,
                    "outstanding_loans": outstanding,
                    "dividends_received": dividends,
                },
            },
            status=status.HTTP_200_OK,
        )


class AccountClosureView(APIView):
    """
    GET returns the final payout a member would receive.
    POST confirms the closure and posts the payout.
    """

    permission_classes = [
        IsSystemAdmin,
    ]

    def get_member(self, member_no):
        try:
            return Member.objects.get(member_no=member_no)
        except Member.DoesNotExist:
            return None

    def get(self, request, member_no):
        member = self.get_member(member_no)
        if member is None:
            return Response(
                {"detail": "Member not found."}, status=status.HTTP_404_NOT_FOUND
            )
        payout = calculate_final_payout(member)
        return Response(
            {
                "member_no": member.member_no,
                "full_name": member.full_name,
                "current_balance": payout["current_balance"],
                "total_shares_paid": payout["total_shares_paid"],
                "accrued_interest": payout["accrued_interest"],
                "total_payout": payout["total_payout"],
            }
        )

    def post(self, request, member_no):
        member = self.get_member(member_no)
        if member is None:
            return Response(
                {"detail": "Member not found."}, status=status.HTTP_404_NOT_FOUND
            )
        serializer = AccountClosureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            member, payout = confirm_account_closure(
                member, user=request.user, **serializer.validated_data
            )
        except serializers.ValidationError:
            raise
        except Exception as e:
            logger.error(f"Account closure failed for {member.member_no}: {str(e)}")
            return Response(
                {"error": "Failed to close the member account."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {
                "message": f"Account for {member.full_name} has been closed.",
                "member": ClosedMemberSerializer(member).data,
                "total_payout": payout["total_payout"],
            },
            status=status.HTTP_200_OK,
        )


class ClosedMemberListView(generics.ListAPIView):
    serializer_class = ClosedMemberSerializer
    permission_classes = [
        IsSystemAdmin,
    ]

    def get_queryset(self):
        return (
            Member.objects.filter(status=Member.INACTIVE)
            .select_related("school")
            .order_by("-closure_date")
        )
