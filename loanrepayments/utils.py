import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from accounts.utils import send_email
from loans.models import Loan
from loanrepayments.models import LoanRepayment
from loanrepayments.calculators import (
    allocate_repayment,
    minimum_instalment,
    next_due_date,
    payoff_amount,
)

logger = logging.getLogger(__name__)


def record_repayment(
    loan,
    amount_paid,
    payment_date,
    deposit_mode="Cash",
    source_name=None,
    transaction_reference=None,
    evidence_url=None,
    notes=None,
    user=None,
    enforce_minimum=True,
):
    """
    Allocate a payment between interest and principal and apply it to the
    loan. The repayment row and the loan update commit together.
    """
    amount_paid = Decimal(amount_paid)
    if amount_paid <= 0:
        raise serializers.ValidationError(
            {"amount_paid": "Payment amount must be positive."}
        )

    with transaction.atomic():
        # Re-read under lock so sequential payments see the latest balance
        loan = Loan.objects.select_for_update().get(pk=loan.pk)
        if not loan.is_open:
            raise serializers.ValidationError(
                {"loan": f"Loan {loan.account_number} is not active."}
            )

        rate = loan.effective_interest_rate
        payoff = payoff_amount(loan.remaining_balance, rate)
        if amount_paid > payoff:
            raise serializers.ValidationError(
                {
                    "amount_paid": f"Payment exceeds the amount needed to pay off loan {loan.account_number} ({payoff})."
                }
            )
        if enforce_minimum:
            minimum = minimum_instalment(
                loan.principal_amount, loan.loan_term, loan.remaining_balance, rate
            )
            if amount_paid < minimum:
                raise serializers.ValidationError(
                    {"amount_paid": f"Payment amount must be at least {minimum}."}
                )

        allocation = allocate_repayment(loan.remaining_balance, rate, amount_paid)

        repayment = LoanRepayment.objects.create(
            loan=loan,
            member_id=loan.member_id,
            amount_paid=amount_paid,
            interest_paid=allocation.interest_paid,
            principal_paid=allocation.principal_paid,
            balance_after=max(allocation.new_balance, Decimal("0.00")),
            payment_date=payment_date,
            deposit_mode=deposit_mode,
            source_name=source_name,
            transaction_reference=transaction_reference,
            evidence_url=evidence_url or None,
            notes=notes,
            recorded_by=user,
        )

        if allocation.is_paid_off:
            loan.remaining_balance = Decimal("0.00")
            loan.status = Loan.PAID_OFF
            loan.next_due_date = None
        else:
            loan.remaining_balance = allocation.new_balance
            loan.next_due_date = next_due_date(
                loan.next_due_date or payment_date, loan.repayment_frequency
            )
            if loan.status == Loan.OVERDUE and loan.next_due_date >= date.today():
                loan.status = Loan.ACTIVE
        loan.save(
            update_fields=["remaining_balance", "status", "next_due_date", "updated_at"]
        )

    logger.info(
        f"Repayment {repayment.reference} on {loan.account_number}: "
        f"interest {allocation.interest_paid}, principal {allocation.principal_paid}, "
        f"balance {loan.remaining_balance}"
    )
    return repayment


def record_batch_repayments(items, user=None):
    """
    Apply a group of repayments in order inside one transaction. Each item
    sees the balance left by the ones before it. Zero amounts are skipped;
    any invalid item rolls back the whole batch.
    """
    created = []
    skipped = 0

    with transaction.atomic():
        for index, item in enumerate(items, 1):
            amount = Decimal(item["amount_paid"])
            if amount == 0:
                skipped += 1
                continue
            if amount < 0:
                raise serializers.ValidationError(
                    {"index": index, "amount_paid": "Payment amount cannot be negative."}
                )
            try:
                repayment = record_repayment(
                    item["loan"],
                    amount,
                    item["payment_date"],
                    deposit_mode=item.get("deposit_mode", "Cash"),
                    source_name=item.get("source_name"),
                    transaction_reference=item.get("transaction_reference"),
                    evidence_url=item.get("evidence_url"),
                    notes=item.get("notes"),
                    user=user,
                    enforce_minimum=False,
                )
            except serializers.ValidationError as e:
                raise serializers.ValidationError({"index": index, "errors": e.detail})
            created.append(repayment)

    logger.info(f"Batch repayment: {len(created)} recorded, {skipped} skipped")
    return created, skipped


def send_repayment_received_email(repayment):
    member = repayment.member
    if not member.email:
        return None
    return send_email(
        member.email,
        "Loan Repayment Received",
        "loan_repayment_received.html",
        {"member": member, "repayment": repayment, "loan": repayment.loan},
    )
