import logging
from django.db.models import Count
from rest_framework import generics, serializers

from accounts.permissions import IsSystemAdminOrReadOnly
from schools.models import School
from schools.serializers import SchoolSerializer

logger = logging.getLogger(__name__)


class SchoolListCreateView(generics.ListCreateAPIView):
    serializer_class = SchoolSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]

    def get_queryset(self):
        return School.objects.annotate(member_count=Count("members"))


class SchoolDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = SchoolSerializer
    permission_classes = [
        IsSystemAdminOrReadOnly,
    ]
    lookup_field = "reference"

    def get_queryset(self):
        return School.objects.annotate(member_count=Count("members"))

    def perform_destroy(self, instance):
        if instance.members.exists():
            raise serializers.ValidationError(
                {
                    "detail": "Cannot delete school with active members. Please reassign or remove members first."
                }
            )
        logger.info(f"Deleted school {instance.name}")
        instance.delete()
