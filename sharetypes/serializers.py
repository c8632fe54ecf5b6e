from decimal import Decimal
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from sharetypes.models import ShareType


class ShareTypeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        required=True,
        validators=[UniqueValidator(queryset=ShareType.objects.all())],
    )
    value_per_share = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )

    class Meta:
        model = ShareType
        fields = (
            "name",
            "description",
            "value_per_share",
            "expected_monthly_contribution",
            "created_at",
            "updated_at",
            "reference",
        )
