import logging
from rest_framework import generics, serializers

from sharetypes.models import ShareType
from sharetypes.serializers import ShareTypeSerializer
from accounts.permissions import IsSystemAdminOrReadOnly

logger = logging.getLogger(__name__)


class ShareTypeListCreateView(generics.ListCreateAPIView):
    queryset = ShareType.objects.all()
    serializer_class = ShareTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]


class ShareTypeDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = ShareType.objects.all()
    serializer_class = ShareTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.commitments.exists() or instance.shares.exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete share type. It is currently in use by member commitments."
                }
            )
        logger.info(f"Deleted share type {instance.name}")
        instance.delete()
