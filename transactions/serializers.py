from rest_framework import serializers

from savings.models import MemberSavingAccount
from schools.models import School


class AccountStatementRequestSerializer(serializers.Serializer):
    account = serializers.SlugRelatedField(
        slug_field="account_number",
        queryset=MemberSavingAccount.objects.select_related(
            "member", "member__school", "account_type"
        ),
    )
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):
        if attrs["start"] > attrs["end"]:
            raise serializers.ValidationError(
                {"start": "Start date must be on or before the end date."}
            )
        return attrs


class StatementLineSerializer(serializers.Serializer):
    date = serializers.DateField()
    reference = serializers.CharField()
    description = serializers.CharField()
    credit = serializers.DecimalField(max_digits=12, decimal_places=2)
    debit = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class AccountStatementSerializer(serializers.Serializer):
    member_no = serializers.CharField()
    full_name = serializers.CharField()
    school = serializers.CharField()
    account_number = serializers.CharField()
    account_type = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    balance_brought_forward = serializers.DecimalField(max_digits=12, decimal_places=2)
    transactions = StatementLineSerializer(many=True)
    closing_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class CollectionForecastRequestSerializer(serializers.Serializer):
    COLLECTION_TYPE_CHOICES = [
        ("savings", "Savings"),
        ("shares", "Shares"),
    ]

    school = serializers.SlugRelatedField(
        slug_field="reference", queryset=School.objects.all()
    )
    collection_type = serializers.ChoiceField(choices=COLLECTION_TYPE_CHOICES)
    type = serializers.CharField()


class CollectionForecastSerializer(serializers.Serializer):
    member_no = serializers.CharField()
    full_name = serializers.CharField()
    school = serializers.CharField()
    expected_contribution = serializers.DecimalField(max_digits=12, decimal_places=2)
