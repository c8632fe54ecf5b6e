from decimal import Decimal
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from servicecharges.models import ServiceChargeType, AppliedServiceCharge
from members.models import Member


class ServiceChargeTypeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        required=True,
        validators=[UniqueValidator(queryset=ServiceChargeType.objects.all())],
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )

    class Meta:
        model = ServiceChargeType
        fields = (
            "name",
            "description",
            "amount",
            "frequency",
            "created_at",
            "updated_at",
            "reference",
        )


class AppliedServiceChargeSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    service_charge_type = serializers.SlugRelatedField(
        slug_field="name", queryset=ServiceChargeType.objects.all()
    )
    amount_charged = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.01"),
        required=False,
    )
    loan = serializers.CharField(source="loan.account_number", read_only=True)

    class Meta:
        model = AppliedServiceCharge
        fields = (
            "member",
            "member_name",
            "service_charge_type",
            "service_charge_type_name",
            "amount_charged",
            "date_applied",
            "status",
            "rejection_reason",
            "notes",
            "loan",
            "interest_period",
            "paid_at",
            "reviewed_at",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = (
            "service_charge_type_name",
            "status",
            "rejection_reason",
            "interest_period",
            "paid_at",
            "reviewed_at",
        )

    def validate(self, attrs):
        if self.instance is not None:
            self.instance.ensure_editable()
            if self.instance.loan_id and self.instance.interest_period:
                reposted = (
                    AppliedServiceCharge.objects.filter(
                        loan_id=self.instance.loan_id,
                        interest_period=self.instance.interest_period,
                    )
                    .exclude(status=AppliedServiceCharge.REJECTED)
                    .exclude(pk=self.instance.pk)
                )
                if reposted.exists():
                    raise serializers.ValidationError(
                        {"detail": "Interest for this period has already been re-posted."}
                    )

        charge_type = attrs.get(
            "service_charge_type", getattr(self.instance, "service_charge_type", None)
        )
        if "amount_charged" not in attrs and self.instance is None:
            if charge_type.amount <= 0:
                raise serializers.ValidationError(
                    {"amount_charged": "This charge type has no default amount."}
                )
            attrs["amount_charged"] = charge_type.amount
        attrs["service_charge_type_name"] = charge_type.name
        return attrs

    def update(self, instance, validated_data):
        instance.resubmit()
        return super().update(instance, validated_data)


class ServiceChargePaymentSerializer(serializers.Serializer):
    DEPOSIT_MODE_CHOICES = ["Cash", "Bank", "Wallet"]

    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    payment_date = serializers.DateField()
    deposit_mode = serializers.ChoiceField(choices=DEPOSIT_MODE_CHOICES)
