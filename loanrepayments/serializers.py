from decimal import Decimal
from rest_framework import serializers

from loanrepayments.models import LoanRepayment
from loans.models import Loan


class LoanRepaymentSerializer(serializers.ModelSerializer):
    loan = serializers.SlugRelatedField(
        slug_field="account_number", queryset=Loan.objects.all()
    )
    member = serializers.CharField(source="member.member_no", read_only=True)
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    amount_paid = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    recorded_by = serializers.CharField(source="recorded_by.email", read_only=True)

    class Meta:
        model = LoanRepayment
        fields = (
            "loan",
            "member",
            "member_name",
            "amount_paid",
            "interest_paid",
            "principal_paid",
            "balance_after",
            "payment_date",
            "deposit_mode",
            "source_name",
            "transaction_reference",
            "evidence_url",
            "notes",
            "recorded_by",
            "created_at",
            "reference",
        )
        read_only_fields = ("interest_paid", "principal_paid", "balance_after")


class BatchRepaymentItemSerializer(serializers.Serializer):
    DEPOSIT_MODE_CHOICES = ["Cash", "Bank", "Wallet"]

    loan = serializers.SlugRelatedField(
        slug_field="account_number", queryset=Loan.objects.all()
    )
    # Zero means the member paid nothing this round
    amount_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateField()
    deposit_mode = serializers.ChoiceField(choices=DEPOSIT_MODE_CHOICES, default="Cash")
    source_name = serializers.CharField(required=False, allow_blank=True)
    transaction_reference = serializers.CharField(required=False, allow_blank=True)
    evidence_url = serializers.URLField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class BatchRepaymentSerializer(serializers.Serializer):
    repayments = BatchRepaymentItemSerializer(many=True, allow_empty=False)
