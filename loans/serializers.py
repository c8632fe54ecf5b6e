from decimal import Decimal
from django.db import transaction
from rest_framework import serializers

from loans.models import Loan, LoanGuarantor, Collateral
from loans.utils import calculate_loan_fees, validate_loan_application
from loantypes.models import LoanType
from members.models import Member
from loanrepayments.calculators import estimate_monthly_repayment


class CollateralSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(
        choices=Collateral.TYPE_CHOICES, default=Collateral.TITLE_DEED
    )

    class Meta:
        model = Collateral
        fields = ("type", "description", "document_url")


class LoanSerializer(serializers.ModelSerializer):
    member = serializers.SlugRelatedField(
        slug_field="member_no", queryset=Member.objects.all()
    )
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    loan_type = serializers.SlugRelatedField(
        slug_field="name", queryset=LoanType.objects.all()
    )
    principal_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    loan_term = serializers.IntegerField(min_value=1)
    monthly_repayment_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    guarantors = serializers.SlugRelatedField(
        slug_field="member_no",
        queryset=Member.objects.all(),
        many=True,
        required=False,
        write_only=True,
    )
    guarantor_members = serializers.SerializerMethodField()
    collaterals = CollateralSerializer(many=True, required=False)

    class Meta:
        model = Loan
        fields = (
            "member",
            "member_name",
            "loan_type",
            "account_number",
            "principal_amount",
            "remaining_balance",
            "interest_rate",
            "status",
            "loan_term",
            "repayment_frequency",
            "disbursement_date",
            "next_due_date",
            "monthly_repayment_amount",
            "service_fee",
            "insurance_fee",
            "purpose",
            "notes",
            "rejection_reason",
            "guarantors",
            "guarantor_members",
            "collaterals",
            "approved_at",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = (
            "account_number",
            "remaining_balance",
            "interest_rate",
            "status",
            "repayment_frequency",
            "next_due_date",
            "service_fee",
            "insurance_fee",
            "rejection_reason",
            "approved_at",
        )

    def get_guarantor_members(self, obj):
        return [
            {"member_no": g.guarantor.member_no, "full_name": g.guarantor.full_name}
            for g in obj.guarantors.select_related("guarantor")
        ]

    def validate(self, attrs):
        if self.instance is not None and self.instance.repayments.exists():
            raise serializers.ValidationError(
                {"detail": "Cannot modify a loan with existing repayments."}
            )

        def current(field):
            return attrs.get(field, getattr(self.instance, field, None))

        member = current("member")
        loan_type = current("loan_type")
        principal = current("principal_amount")
        term = current("loan_term")
        guarantors = attrs.get("guarantors")
        if guarantors is None:
            guarantors = (
                [g.guarantor for g in self.instance.guarantors.all()]
                if self.instance is not None
                else []
            )

        validate_loan_application(
            member, loan_type, principal, term, guarantors, loan=self.instance
        )

        insurance_fee, service_fee = calculate_loan_fees(principal, loan_type)
        attrs["insurance_fee"] = insurance_fee
        attrs["service_fee"] = service_fee
        attrs["interest_rate"] = loan_type.interest_rate
        attrs["repayment_frequency"] = loan_type.repayment_frequency
        attrs["remaining_balance"] = principal
        if not attrs.get("monthly_repayment_amount"):
            attrs["monthly_repayment_amount"] = estimate_monthly_repayment(
                principal, loan_type.interest_rate, term
            )
        return attrs

    def _save_related(self, loan, guarantors, collaterals):
        if guarantors is not None:
            loan.guarantors.all().delete()
            LoanGuarantor.objects.bulk_create(
                [LoanGuarantor(loan=loan, guarantor=member) for member in guarantors]
            )
        if collaterals is not None:
            loan.collaterals.all().delete()
            Collateral.objects.bulk_create(
                [Collateral(loan=loan, **item) for item in collaterals]
            )

    def create(self, validated_data):
        guarantors = validated_data.pop("guarantors", [])
        collaterals = validated_data.pop("collaterals", [])
        with transaction.atomic():
            loan = Loan.objects.create(**validated_data)
            self._save_related(loan, guarantors, collaterals)
        return loan

    def update(self, instance, validated_data):
        guarantors = validated_data.pop("guarantors", None)
        collaterals = validated_data.pop("collaterals", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            self._save_related(instance, guarantors, collaterals)
        return instance


class LoanRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class OverdueLoanSerializer(serializers.ModelSerializer):
    member = serializers.CharField(source="member.member_no", read_only=True)
    member_name = serializers.CharField(source="member.full_name", read_only=True)
    loan_type = serializers.CharField(source="loan_type.name", read_only=True)
    school = serializers.CharField(source="member.school.name", read_only=True)
    days_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Loan
        fields = (
            "member",
            "member_name",
            "school",
            "loan_type",
            "account_number",
            "remaining_balance",
            "monthly_repayment_amount",
            "status",
            "next_due_date",
            "days_overdue",
            "reference",
        )

    def get_days_overdue(self, obj):
        return obj.days_overdue()
