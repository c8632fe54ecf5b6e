import logging
from datetime import date
from decimal import Decimal

from django.db.models import Sum
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsSystemAdmin
from approvals.utils import pending_transactions
from dividends.models import Dividend
from loans.models import Loan
from members.models import Member
from savings.models import MemberSavingAccount
from schools.models import School
from transactions.serializers import (
    AccountStatementRequestSerializer,
    AccountStatementSerializer,
    CollectionForecastRequestSerializer,
    CollectionForecastSerializer,
)
from transactions.utils import (
    build_account_statement,
    collection_forecast,
    savings_trend,
    school_performance,
)

logger = logging.getLogger(__name__)


class AccountStatementView(APIView):
    """
    Statement for one savings account:
    ?account=<account_number>&start=YYYY-MM-DD&end=YYYY-MM-DD
    """

    permission_classes = [
        IsAuthenticated,
    ]

    def get(self, request):
        params = AccountStatementRequestSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        account = params.validated_data["account"]

        user = request.user
        if not (user.is_system_admin or user.is_superuser):
            if user.member_id is None or account.member_id != user.member_id:
                raise PermissionDenied("You can only view your own statements.")

        statement = build_account_statement(
            account, params.validated_data["start"], params.validated_data["end"]
        )
        return Response(
            AccountStatementSerializer(statement).data, status=status.HTTP_200_OK
        )


class CollectionForecastView(APIView):
    """
    Expected monthly collections for a school:
    ?school=<reference>&collection_type=savings|shares&type=<type name>
    """

    permission_classes = [
        IsSystemAdmin,
    ]

    def get(self, request):
        params = CollectionForecastRequestSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        rows = collection_forecast(data["school"], data["collection_type"], data["type"])
        total = sum((row["expected_contribution"] for row in rows), Decimal("0.00"))
        return Response(
            {
                "school": data["school"].name,
                "collection_type": data["collection_type"],
                "type": data["type"],
                "total_expected": total,
                "members": CollectionForecastSerializer(rows, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class AdminDashboardView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def get(self, request):
        try:
            today = date.today()
            total_savings = MemberSavingAccount.objects.aggregate(
                total=Sum("balance")
            )["total"] or Decimal("0.00")
            dividends_ytd = Dividend.objects.filter(
                status=Dividend.APPROVED, distribution_date__year=today.year
            ).aggregate(total=Sum("amount"))["total"] or Decimal("0.00")
            outstanding_loans = Loan.objects.filter(
                status__in=Loan.OPEN_STATUSES
            ).aggregate(total=Sum("remaining_balance"))["total"] or Decimal("0.00")

            return Response(
                {
                    "active_members": Member.objects.filter(
                        status=Member.ACTIVE
                    ).count(),
                    "total_savings": total_savings,
                    "schools": School.objects.count(),
                    "dividends_ytd": dividends_ytd,
                    "outstanding_loans": outstanding_loans,
                    "pending_approvals": len(pending_transactions()),
                    "savings_trend": savings_trend(today=today),
                    "school_performance": school_performance(),
                },
                status=status.HTTP_200_OK,
            )
        except Exception as e:
            logger.error(f"Failed to build admin dashboard: {str(e)}")
            return Response(
                {"error": "Failed to load dashboard."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
