import string
import secrets
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers

MAX_GUARANTEED_LOANS = 2
INSURANCE_FEE_RATE = Decimal("0.01")
SERVICE_FEE = Decimal("15.00")


def generate_loan_account_number():
    """Generate a random 8-digit loan account number."""
    year = datetime.now().year % 100
    random_number = "".join(secrets.choice(string.digits) for _ in range(8))
    return f"LN{year}{random_number}"


def calculate_loan_fees(principal_amount, loan_type):
    """Insurance (1% of principal) and the flat service fee, where charged."""
    if not loan_type.charges_fees:
        return Decimal("0.00"), Decimal("0.00")
    insurance_fee = (Decimal(principal_amount) * INSURANCE_FEE_RATE).quantize(
        Decimal("0.01"), ROUND_HALF_UP
    )
    return insurance_fee, SERVICE_FEE


def validate_loan_application(member, loan_type, principal_amount, loan_term, guarantors, loan=None):
    """
    Raise ValidationError when a loan may not be granted as requested.
    ``loan`` is the loan being edited, if any.
    """
    from loans.models import Loan, LoanGuarantor

    if not member.is_active:
        raise serializers.ValidationError(
            {"member": "Loans can only be issued to active members."}
        )

    if loan_type.max_loan_amount and (
        principal_amount < loan_type.min_loan_amount
        or principal_amount > loan_type.max_loan_amount
    ):
        raise serializers.ValidationError(
            {
                "principal_amount": f"Loan amount must be between {loan_type.min_loan_amount:,} and {loan_type.max_loan_amount:,} for this loan type."
            }
        )

    if (
        loan_term < loan_type.min_repayment_period
        or loan_term > loan_type.max_repayment_period
    ):
        raise serializers.ValidationError(
            {
                "loan_term": f"Repayment period must be between {loan_type.min_repayment_period} and {loan_type.max_repayment_period} months for this loan type."
            }
        )

    if not loan_type.allow_concurrent_loans:
        existing = Loan.objects.filter(
            member=member,
            loan_type=loan_type,
            status__in=[Loan.PENDING, Loan.ACTIVE, Loan.OVERDUE],
        )
        if loan is not None:
            existing = existing.exclude(pk=loan.pk)
        if existing.exists():
            raise serializers.ValidationError(
                {
                    "loan_type": f"Member already has an open {loan_type.name} and this loan type does not allow concurrent loans."
                }
            )

    for guarantor in guarantors:
        if guarantor.pk == member.pk:
            raise serializers.ValidationError(
                {"guarantors": "A member cannot guarantee their own loan."}
            )
        if not guarantor.is_active:
            raise serializers.ValidationError(
                {"guarantors": f"{guarantor.full_name} is not an active member."}
            )
        guaranteed = LoanGuarantor.objects.filter(
            guarantor=guarantor, loan__status__in=Loan.OPEN_STATUSES
        )
        if loan is not None:
            guaranteed = guaranteed.exclude(loan=loan)
        if guaranteed.count() >= MAX_GUARANTEED_LOANS:
            raise serializers.ValidationError(
                {
                    "guarantors": f"Member {guarantor.full_name} is already guaranteeing two active loans and cannot be added as a guarantor."
                }
            )
