from rest_framework import serializers


class InterestRunSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
    scope = serializers.CharField(default="all")
    scope_value = serializers.CharField(required=False, allow_blank=True)


class SavingsInterestResultSerializer(serializers.Serializer):
    member_no = serializers.CharField()
    full_name = serializers.CharField()
    account_number = serializers.CharField()
    account_type = serializers.CharField()
    savings_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    average_daily_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    interest_rate = serializers.DecimalField(max_digits=6, decimal_places=2)
    calculated_interest = serializers.DecimalField(max_digits=12, decimal_places=2)
    already_posted = serializers.BooleanField()


class LoanInterestResultSerializer(serializers.Serializer):
    member_no = serializers.CharField()
    full_name = serializers.CharField()
    loan_account_number = serializers.CharField()
    status = serializers.CharField()
    remaining_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    interest_rate = serializers.DecimalField(max_digits=6, decimal_places=2)
    calculated_interest = serializers.DecimalField(max_digits=12, decimal_places=2)
    already_posted = serializers.BooleanField()
