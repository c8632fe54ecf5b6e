from decimal import Decimal
from rest_framework import serializers

from savingstransactions.models import Saving
from savings.models import MemberSavingAccount
from members.models import Member


class SavingSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    savings_account = serializers.SlugRelatedField(
        slug_field="account_number", queryset=MemberSavingAccount.objects.all()
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    recorded_by = serializers.CharField(source="recorded_by.email", read_only=True)
    reviewed_by = serializers.CharField(source="reviewed_by.email", read_only=True)

    class Meta:
        model = Saving
        fields = (
            "member",
            "member_name",
            "savings_account",
            "amount",
            "date",
            "month",
            "transaction_type",
            "status",
            "rejection_reason",
            "notes",
            "deposit_mode",
            "source_name",
            "transaction_reference",
            "evidence_url",
            "interest_period",
            "recorded_by",
            "reviewed_by",
            "reviewed_at",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = (
            "month",
            "status",
            "rejection_reason",
            "interest_period",
            "reviewed_at",
        )

    def validate(self, attrs):
        if self.instance is not None:
            self.instance.ensure_editable()

        member = attrs.get("member", getattr(self.instance, "member", None))
        account = attrs.get(
            "savings_account", getattr(self.instance, "savings_account", None)
        )
        amount = attrs.get("amount", getattr(self.instance, "amount", None))
        transaction_type = attrs.get(
            "transaction_type",
            getattr(self.instance, "transaction_type", Saving.DEPOSIT),
        )

        if account.member_id != member.pk:
            raise serializers.ValidationError(
                {"savings_account": "Savings account does not belong to this member."}
            )
        if self.instance is None and not member.is_active:
            raise serializers.ValidationError(
                {"member": "Cannot record savings for an inactive member."}
            )
        if self.instance is not None and self.instance.interest_period:
            reposted = (
                Saving.objects.filter(
                    savings_account=account,
                    interest_period=self.instance.interest_period,
                )
                .exclude(status=Saving.REJECTED)
                .exclude(pk=self.instance.pk)
            )
            if reposted.exists():
                raise serializers.ValidationError(
                    {"detail": "Interest for this period has already been re-posted."}
                )
        if transaction_type == Saving.WITHDRAWAL and amount > account.balance:
            raise serializers.ValidationError(
                {
                    "amount": "Withdrawal amount cannot exceed the selected account's balance."
                }
            )
        return attrs

    def update(self, instance, validated_data):
        # Any edit sends the record back to the approval queue
        instance.resubmit()
        if "date" in validated_data:
            instance.month = ""
        return super().update(instance, validated_data)


class GroupCollectionSerializer(serializers.Serializer):
    savings = serializers.ListField(
        child=serializers.DictField(), allow_empty=False
    )
