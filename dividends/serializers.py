from decimal import Decimal
from rest_framework import serializers

from dividends.models import Dividend
from members.models import Member


class DividendSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    share_count_at_distribution = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = Dividend
        fields = (
            "member",
            "member_name",
            "amount",
            "distribution_date",
            "share_count_at_distribution",
            "status",
            "rejection_reason",
            "notes",
            "reviewed_at",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = ("status", "rejection_reason", "reviewed_at")

    def validate(self, attrs):
        if self.instance is not None:
            self.instance.ensure_editable()
        member = attrs.get("member", getattr(self.instance, "member", None))
        if self.instance is None and "share_count_at_distribution" not in attrs:
            attrs["share_count_at_distribution"] = member.shares_count
        return attrs

    def update(self, instance, validated_data):
        instance.resubmit()
        return super().update(instance, validated_data)
