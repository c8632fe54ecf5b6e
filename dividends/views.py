import logging
from rest_framework import generics, serializers

from dividends.models import Dividend
from dividends.serializers import DividendSerializer
from accounts.permissions import IsSystemAdminOrReadOnly, IsSystemAdminOrOwnMember

logger = logging.getLogger(__name__)


class DividendListCreateView(generics.ListCreateAPIView):
    serializer_class = DividendSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = Dividend.objects.select_related("member")
        user = self.request.user
        if not (user.is_system_admin or user.is_superuser):
            queryset = queryset.filter(member_id=user.member_id)
        if self.request.query_params.get("status"):
            queryset = queryset.filter(status=self.request.query_params["status"])
        return queryset

    def perform_create(self, serializer):
        dividend = serializer.save(recorded_by=self.request.user)
        logger.info(
            f"Recorded pending dividend {dividend.reference} for {dividend.member.member_no}"
        )


class DividendDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Dividend.objects.select_related("member")
    serializer_class = DividendSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.is_approved:
            raise serializers.ValidationError(
                {"detail": "Cannot delete an approved dividend record."}
            )
        instance.delete()
