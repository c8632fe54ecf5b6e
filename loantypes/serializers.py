from decimal import Decimal
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from loantypes.models import LoanType


class LoanTypeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        required=True,
        validators=[UniqueValidator(queryset=LoanType.objects.all())],
    )
    interest_rate = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=Decimal("0.00")
    )
    npl_interest_rate = serializers.DecimalField(
        max_digits=6,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    loan_term = serializers.IntegerField(min_value=1, required=False)
    min_repayment_period = serializers.IntegerField(min_value=1, required=False)
    max_repayment_period = serializers.IntegerField(min_value=1, required=False)

    class Meta:
        model = LoanType
        fields = (
            "name",
            "description",
            "interest_rate",
            "npl_interest_rate",
            "loan_term",
            "repayment_frequency",
            "allow_concurrent_loans",
            "min_loan_amount",
            "max_loan_amount",
            "min_repayment_period",
            "max_repayment_period",
            "charges_fees",
            "created_at",
            "updated_at",
            "reference",
        )

    def validate(self, attrs):
        def current(field, default):
            return attrs.get(field, getattr(self.instance, field, default))

        # A zero maximum means no amount limit
        max_amount = current("max_loan_amount", Decimal("0"))
        if max_amount and current("min_loan_amount", Decimal("0")) > max_amount:
            raise serializers.ValidationError(
                {"max_loan_amount": "Maximum amount must not be below the minimum."}
            )
        if current("min_repayment_period", 1) > current("max_repayment_period", 12):
            raise serializers.ValidationError(
                {
                    "max_repayment_period": "Maximum repayment period must not be below the minimum."
                }
            )
        return attrs
