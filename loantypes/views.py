import logging
from rest_framework import generics, serializers

from accounts.permissions import IsSystemAdminOrReadOnly
from loantypes.models import LoanType
from loantypes.serializers import LoanTypeSerializer

logger = logging.getLogger(__name__)


class LoanTypeListCreateView(generics.ListCreateAPIView):
    queryset = LoanType.objects.all()
    serializer_class = LoanTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def perform_create(self, serializer):
        loan_type = serializer.save()
        logger.info(f"Created loan type {loan_type.name}")


class LoanTypeDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset = LoanType.objects.all()
    serializer_class = LoanTypeSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]
    lookup_field = "reference"

    def perform_destroy(self, instance):
        if instance.loans.exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete loan type. It is currently in use by active loans."
                }
            )
        instance.delete()
