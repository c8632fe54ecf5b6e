import logging
from rest_framework import generics, serializers

from shares.models import Share
from shares.serializers import ShareSerializer
from accounts.permissions import IsSystemAdminOrReadOnly, IsSystemAdminOrOwnMember

logger = logging.getLogger(__name__)


class ShareListCreateView(generics.ListCreateAPIView):
    serializer_class = ShareSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        queryset = Share.objects.select_related("member", "share_type")
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
        share = serializer.save(recorded_by=self.request.user)
        logger.info(
            f"Recorded pending allocation {share.reference}: {share.count} shares for {share.member.member_no}"
        )


class ShareDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = Share.objects.select_related("member", "share_type")
    serializer_class = ShareSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
        IsSystemAdminOrOwnMember,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.is_approved:
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete an approved share record. Please contact an administrator for adjustments."
                }
            )
        instance.delete()
