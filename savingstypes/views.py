import logging
from rest_framework import generics, serializers

from savingstypes.models import SavingAccountType
from savingstypes.serializers import SavingAccountTypeSerializer
from accounts.permissions import IsSystemAdminOrReadOnly

logger = logging.getLogger(__name__)


class SavingAccountTypeListCreateView(generics.ListCreateAPIView):
    queryset = SavingAccountType.objects.all()
    serializer_class = SavingAccountTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]


class SavingAccountTypeDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = SavingAccountType.objects.all()
    serializer_class = SavingAccountTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.savings_accounts.exists() or instance.members.exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete account type. It is currently in use by members."
                }
            )
        logger.info(f"Deleted saving account type {instance.name}")
        instance.delete()
