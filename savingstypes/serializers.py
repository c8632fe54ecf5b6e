from decimal import Decimal
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from savingstypes.models import SavingAccountType


class SavingAccountTypeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        required=True,
        validators=[UniqueValidator(queryset=SavingAccountType.objects.all())],
    )
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    interest_rate = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=Decimal("0.00")
    )
    contribution_value = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )

    class Meta:
        model = SavingAccountType
        fields = (
            "name",
            "description",
            "interest_rate",
            "contribution_type",
            "contribution_value",
            "created_at",
            "updated_at",
            "reference",
        )
