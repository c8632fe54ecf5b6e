import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum, Q
from rest_framework import generics, serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from servicecharges.models import ServiceChargeType, AppliedServiceCharge
from servicecharges.serializers import (
    ServiceChargeTypeSerializer,
    AppliedServiceChargeSerializer,
    ServiceChargePaymentSerializer,
)
from servicecharges.utils import record_charge_payment
from accounts.permissions import (
    IsSystemAdmin,
    IsSystemAdminOrReadOnly,
    IsSystemAdminOrOwnMember,
)
from members.models import Member

logger = logging.getLogger(__name__)


class ServiceChargeTypeListCreateView(generics.ListCreateAPIView):
    queryset = ServiceChargeType.objects.all()
    serializer_class = ServiceChargeTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]


class ServiceChargeTypeDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = ServiceChargeType.objects.all()
    serializer_class = ServiceChargeTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.applied_charges.exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete charge type. It has been applied to members."
                }
            )
        instance.delete()


class AppliedServiceChargeListCreateView(generics.ListCreateAPIView):
    serializer_class = AppliedServiceChargeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = AppliedServiceCharge.objects.select_related(
            "member", "service_charge_type", "loan"
        )
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)
        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("member"):
            queryset = queryset.filter(member__member_no=params["member"])
        return queryset

    def perform_create(self, serializer):
        charge = serializer.save(recorded_by=self.request.user)
        logger.info(
            f"Applied pending charge {charge.reference} ({charge.service_charge_type_name}) to {charge.member.member_no}"
        )


class AppliedServiceChargeDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = AppliedServiceCharge.objects.select_related(
        "member", "service_charge_type"
    )
    serializer_class = AppliedServiceChargeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.status in (AppliedServiceCharge.APPROVED, AppliedServiceCharge.PAID):
            raise serializers.ValidationError(
                {"detail": f"Cannot delete a {instance.status} service charge."}
            )
        instance.delete()


class ServiceChargePaymentView(APIView):
    permission_classes = [
        IsSystemAdmin,
    ]

    def post(self, request):
        serializer = ServiceChargePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        settled, remaining = record_charge_payment(
            data["member"], data["amount"], data["payment_date"], data["deposit_mode"]
        )
        return Response(
            {
                "message": f"Payment of {data['amount']} applied successfully.",
                "settled_charges": AppliedServiceChargeSerializer(settled, many=True).data,
                "unapplied_amount": remaining,
            },
            status=status.HTTP_200_OK,
        )


class ServiceChargeSummaryView(APIView):
    """
    Per-member totals for active members: applied, paid and outstanding.
    """

    permission_classes = [
        IsSystemAdmin,
    ]

    def get(self, request):
        members = Member.objects.filter(status=Member.ACTIVE).select_related("school")
        if request.query_params.get("school"):
            members = members.filter(school__reference=request.query_params["school"])

        members = members.annotate(
            total_applied=Sum(
                "service_charges__amount_charged",
                filter=Q(
                    service_charges__status__in=[
                        AppliedServiceCharge.APPROVED,
                        AppliedServiceCharge.PAID,
                    ]
                ),
            ),
            total_paid=Sum(
                "service_charges__amount_charged",
                filter=Q(service_charges__status=AppliedServiceCharge.PAID),
            ),
        )

        summaries = []
        for member in members:
            applied = member.total_applied or Decimal("0")
            paid = member.total_paid or Decimal("0")
            if applied > 0:
                percentage = (paid / applied * 100).quantize(
                    Decimal("0.01"), ROUND_HALF_UP
                )
            else:
                percentage = Decimal("100.00")
            summaries.append(
                {
                    "member_no": member.member_no,
                    "full_name": member.full_name,
                    "school": member.school.name,
                    "total_applied": applied,
                    "total_paid": paid,
                    "total_outstanding": applied - paid,
                    "fulfillment_percentage": percentage,
                }
            )
        return Response(summaries, status=status.HTTP_200_OK)
