import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from servicecharges.models import AppliedServiceCharge

logger = logging.getLogger(__name__)


def record_charge_payment(member, amount, payment_date, deposit_mode):
    """
    Settle a member's approved charges oldest first. Only whole charges are
    settled; the run stops at the first charge the remaining amount cannot
    cover. Returns the settled charges and the unapplied remainder.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise serializers.ValidationError({"amount": "Amount must be greater than 0."})

    settled = []
    remaining = amount

    with transaction.atomic():
        charges = (
            AppliedServiceCharge.objects.select_for_update()
            .filter(member=member, status=AppliedServiceCharge.APPROVED)
            .order_by("date_applied", "created_at")
        )
        if not charges:
            raise serializers.ValidationError(
                {"detail": "No outstanding charges found for this member."}
            )

        for charge in charges:
            if remaining < charge.amount_charged:
                break
            charge.status = AppliedServiceCharge.PAID
            charge.paid_at = timezone.now()
            charge.notes = f"{charge.notes or ''} Paid on {payment_date} via {deposit_mode}.".strip()
            charge.save(update_fields=["status", "paid_at", "notes", "updated_at"])
            remaining -= charge.amount_charged
            settled.append(charge)

    logger.info(
        f"Service charge payment of {amount} for {member.member_no}: "
        f"{len(settled)} charges settled, {remaining} unapplied"
    )
    return settled, remaining
