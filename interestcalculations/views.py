import logging
from decimal import Decimal

from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from interestcalculations.serializers import (
    InterestRunSerializer,
    SavingsInterestResultSerializer,
    LoanInterestResultSerializer,
)
from interestcalculations.services import (
    calculate_savings_interest,
    post_savings_interest,
    calculate_loan_interest,
    post_loan_interest,
)
from savingstransactions.serializers import SavingSerializer
from servicecharges.serializers import AppliedServiceChargeSerializer
from accounts.permissions import IsSystemAdmin

logger = logging.getLogger(__name__)


class BaseInterestRunView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def run(self, request, handler):
        params = InterestRunSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        try:
            return handler(
                data["year"],
                data["month"],
                data["scope"],
                data.get("scope_value") or None,
            )
        except serializers.ValidationError:
            raise
        except ValueError as e:
            raise serializers.ValidationError({"detail": str(e)})
        except Exception as e:
            logger.error(f"Interest run failed: {str(e)}")
            return Response(
                {"error": "An error occurred while calculating interest."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )


class SavingsInterestCalculateView(BaseInterestRunView):
    """Dry run: nothing is written."""

    def post(self, request):
        def handler(year, month, scope, scope_value):
            results = calculate_savings_interest(year, month, scope, scope_value)
            postable = [r for r in results if not r["already_posted"]]
            return Response(
                {
                    "results": SavingsInterestResultSerializer(results, many=True).data,
                    "total_interest": sum(
                        (r["calculated_interest"] for r in postable), Decimal("0.00")
                    ),
                    "postable_count": len(postable),
                    "already_posted_count": len(results) - len(postable),
                },
                status=status.HTTP_200_OK,
            )

        return self.run(request, handler)


class SavingsInterestPostView(BaseInterestRunView):
    def post(self, request):
        def handler(year, month, scope, scope_value):
            created, skipped = post_savings_interest(
                year, month, scope, scope_value, user=request.user
            )
            return Response(
                {
                    "message": f"{len(created)} interest transactions have been submitted for approval.",
                    "created_count": len(created),
                    "skipped": skipped,
                    "transactions": SavingSerializer(created, many=True).data,
                },
                status=status.HTTP_201_CREATED,
            )

        return self.run(request, handler)


class LoanInterestCalculateView(BaseInterestRunView):
    def post(self, request):
        def handler(year, month, scope, scope_value):
            results = calculate_loan_interest(year, month, scope, scope_value)
            return Response(
                {
                    "results": LoanInterestResultSerializer(results, many=True).data,
                    "total_interest": sum(
                        (
                            r["calculated_interest"]
                            for r in results
                            if not r["already_posted"]
                        ),
                        Decimal("0.00"),
                    ),
                },
                status=status.HTTP_200_OK,
            )

        return self.run(request, handler)


class LoanInterestPostView(BaseInterestRunView):
    def post(self, request):
        def handler(year, month, scope, scope_value):
            created, skipped = post_loan_interest(
                year, month, scope, scope_value, user=request.user
            )
            return Response(
                {
                    "message": f"{len(created)} loan interest charges have been submitted as service charges.",
                    "created_count": len(created),
                    "skipped": skipped,
                    "charges": AppliedServiceChargeSerializer(created, many=True).data,
                },
                status=status.HTTP_201_CREATED,
            )

        return self.run(request, handler)
