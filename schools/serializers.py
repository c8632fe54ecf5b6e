from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from schools.models import School


class SchoolSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        required=True,
        validators=[UniqueValidator(queryset=School.objects.all())],
    )
    member_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = School
        fields = (
            "name",
            "address",
            "contact_person",
            "member_count",
            "created_at",
            "updated_at",
            "reference",
        )
