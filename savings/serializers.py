from decimal import Decimal
from rest_framework import serializers

from savings.models import MemberSavingAccount
from savingstypes.models import SavingAccountType
from members.models import Member


class MemberSavingAccountSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    account_type = serializers.SlugRelatedField(
        slug_field="name", queryset=SavingAccountType.objects.all()
    )
    initial_balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    expected_monthly_saving = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )

    class Meta:
        model = MemberSavingAccount
        fields = (
            "member",
            "member_name",
            "account_type",
            "account_number",
            "initial_balance",
            "balance",
            "expected_monthly_saving",
            "is_active",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = ("account_number", "balance")

    def validate(self, attrs):
        member = attrs.get("member", getattr(self.instance, "member", None))
        account_type = attrs.get(
            "account_type", getattr(self.instance, "account_type", None)
        )

        if self.instance is not None and "member" in attrs:
            if attrs["member"].pk != self.instance.member_id:
                raise serializers.ValidationError(
                    {"member": "A savings account cannot be moved to another member."}
                )

        if self.instance is None and member and not member.is_active:
            raise serializers.ValidationError(
                {"member": "Cannot open an account for an inactive member."}
            )

        existing = MemberSavingAccount.objects.filter(
            member=member, account_type=account_type
        )
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError(
                {"account_type": "Member already has an account of this type."}
            )

        if self.instance is not None and "initial_balance" in attrs:
            if attrs["initial_balance"] != self.instance.initial_balance:
                raise serializers.ValidationError(
                    {"initial_balance": "Initial balance cannot be changed."}
                )
        return attrs


class SavingsAccountSummarySerializer(serializers.Serializer):
    member_no = serializers.CharField()
    full_name = serializers.CharField()
    school = serializers.CharField()
    account_number = serializers.CharField()
    account_type = serializers.CharField()
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    expected_monthly_saving = serializers.DecimalField(max_digits=12, decimal_places=2)
    fulfillment_percentage = serializers.DecimalField(max_digits=8, decimal_places=2)
