import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from rest_framework import generics, serializers, status
from rest_framework.response import Response

from savingstransactions.models import Saving
from savingstransactions.serializers import SavingSerializer, GroupCollectionSerializer
from accounts.permissions import (
    IsSystemAdmin,
    IsSystemAdminOrReadOnly,
    IsSystemAdminOrOwnMember,
)

logger = logging.getLogger(__name__)


class SavingListCreateView(generics.ListCreateAPIView):
    serializer_class = SavingSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = Saving.objects.select_related(
            "member", "savings_account", "recorded_by", "reviewed_by"
        )
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)

        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("member"):
            queryset = queryset.filter(member__member_no=params["member"])
        if params.get("account"):
            queryset = queryset.filter(
                savings_account__account_number=params["account"]
            )
        if params.get("type"):
            queryset = queryset.filter(transaction_type=params["type"])
        return queryset

    def perform_create(self, serializer):
        saving = serializer.save(recorded_by=self.request.user)
        logger.info(
            f"Recorded pending {saving.transaction_type} {saving.reference} of {saving.amount}"
        )


class SavingDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Saving.objects.select_related("member", "savings_account")
    serializer_class = SavingSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.is_approved:
            raise serializers.ValidationError(
                {"detail": "Cannot delete an approved transaction."}
            )
        logger.info(f"Deleted saving {instance.reference}")
        instance.delete()


class GroupCollectionView(generics.CreateAPIView):
    """
    Record one round of collections for many members at once.

    Every row becomes a pending saving. Rows with a zero amount are members
    who paid nothing this round and are skipped. Any invalid row aborts the
    whole batch.
    """

    serializer_class = GroupCollectionSerializer
    permission_classes = [
        IsSystemAdmin,
    ]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rows = serializer.validated_data["savings"]

        created = []
        skipped = 0
        with transaction.atomic():
            for index, row in enumerate(rows, 1):
                try:
                    amount = Decimal(str(row.get("amount", "0")))
                except (InvalidOperation, ValueError):
                    raise serializers.ValidationError(
                        {"index": index, "errors": {"amount": "A valid number is required."}}
                    )
                if amount == 0:
                    skipped += 1
                    continue

                item = SavingSerializer(data=row)
                if not item.is_valid():
                    raise serializers.ValidationError(
                        {"index": index, "errors": item.errors}
                    )
                created.append(item.save(recorded_by=request.user))

        logger.info(
            f"Group collection by {request.user.email}: {len(created)} created, {skipped} skipped"
        )
        return Response(
            {
                "message": f"Successfully submitted {len(created)} savings collections for approval.",
                "created_count": len(created),
                "skipped_count": skipped,
                "savings": SavingSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )
