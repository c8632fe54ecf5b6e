import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import F
from rest_framework import generics, serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from savings.models import MemberSavingAccount
from savings.serializers import (
    MemberSavingAccountSerializer,
    SavingsAccountSummarySerializer,
)
from accounts.permissions import IsSystemAdminOrReadOnly, IsSystemAdminOrOwnMember
from members.models import Member

logger = logging.getLogger(__name__)


class MemberSavingAccountListCreateView(generics.ListCreateAPIView):
    serializer_class = MemberSavingAccountSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = MemberSavingAccount.objects.select_related(
            "member", "account_type"
        )
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)
        member_no = self.request.query_params.get("member")
        if member_no:
            queryset = queryset.filter(member__member_no=member_no)
        return queryset

    def perform_create(self, serializer):
        account = serializer.save()
        logger.info(
            f"Opened savings account {account.account_number} for {account.member.member_no}"
        )


class MemberSavingAccountDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = MemberSavingAccount.objects.select_related("member", "account_type")
    serializer_class = MemberSavingAccountSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.transactions.exists():
            raise serializers.ValidationError(
                {"detail": "Cannot delete an account that has transactions."}
            )
        with transaction.atomic():
            Member.objects.filter(pk=instance.member_id).update(
                savings_balance=F("savings_balance") - instance.balance
            )
            instance.delete()


def fulfillment_percentage(account, today=None):
    """
    Share of the expected contributions since the account was opened that
    has actually been saved. No expectation counts as fully met.
    """
    today = today or date.today()
    opened = account.created_at.date()
    months = 0
    if opened <= today:
        delta = relativedelta(today, opened)
        months = delta.years * 12 + delta.months

    expected = Decimal(account.expected_monthly_saving or 0) * months
    contributed = Decimal(account.balance) - Decimal(account.initial_balance)

    if expected > 0:
        percentage = contributed / expected * 100
    elif contributed >= 0:
        percentage = Decimal("100")
    else:
        percentage = Decimal("0")
    return percentage.quantize(Decimal("0.01"), ROUND_HALF_UP)


class SavingsAccountSummaryView(APIView):
    """
    Active members' accounts with their contribution fulfilment.
    Optional ?school=<reference> filter.
    """

    permission_classes = [
        IsAuthenticated,
    ]

    def get(self, request):
        accounts = MemberSavingAccount.objects.filter(
            member__status=Member.ACTIVE
        ).select_related("member", "member__school", "account_type")
        user = request.user
        if not (user.is_system_admin or user.is_superuser):
            accounts = accounts.filter(member_id=user.member_id)
        school = request.query_params.get("school")
        if school:
            accounts = accounts.filter(member__school__reference=school)

        summaries = [
            {
                "member_no": account.member.member_no,
                "full_name": account.member.full_name,
                "school": account.member.school.name,
                "account_number": account.account_number,
                "account_type": account.account_type.name,
                "balance": account.balance,
                "expected_monthly_saving": account.expected_monthly_saving,
                "fulfillment_percentage": fulfillment_percentage(account),
            }
            for account in accounts.order_by("member__full_name")
        ]
        return Response(SavingsAccountSummarySerializer(summaries, many=True).data)
