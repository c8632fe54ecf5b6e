from decimal import Decimal
from rest_framework import serializers

from shares.models import Share
from shares.utils import allocate_shares
from members.models import Member
from sharetypes.models import ShareType


class ShareSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    share_type = serializers.SlugRelatedField(
        slug_field="name", queryset=ShareType.objects.all()
    )
    contribution_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )

    class Meta:
        model = Share
        fields = (
            "member",
            "member_name",
            "share_type",
            "transaction_type",
            "count",
            "allocation_date",
            "value_per_share",
            "contribution_amount",
            "total_value_allocated",
            "status",
            "rejection_reason",
            "deposit_mode",
            "source_name",
            "transaction_reference",
            "evidence_url",
            "notes",
            "reviewed_at",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = (
            "transaction_type",
            "count",
            "value_per_share",
            "total_value_allocated",
            "status",
            "rejection_reason",
            "reviewed_at",
        )

    def validate(self, attrs):
        if self.instance is not None:
            self.instance.ensure_editable()

        member = attrs.get("member", getattr(self.instance, "member", None))
        share_type = attrs.get("share_type", getattr(self.instance, "share_type", None))
        contribution = attrs.get(
            "contribution_amount", getattr(self.instance, "contribution_amount", None)
        )

        if self.instance is None and not member.is_active:
            raise serializers.ValidationError(
                {"member": "Cannot allocate shares to an inactive member."}
            )

        try:
            count, total_value = allocate_shares(contribution, share_type.value_per_share)
        except ValueError as e:
            raise serializers.ValidationError({"contribution_amount": str(e)})

        attrs["count"] = count
        attrs["value_per_share"] = share_type.value_per_share
        attrs["total_value_allocated"] = total_value
        return attrs

    def update(self, instance, validated_data):
        instance.resubmit()
        return super().update(instance, validated_data)
