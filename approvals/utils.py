import logging
from dataclasses import dataclass, asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from accounts.utils import send_email
from savingstransactions.models import Saving
from shares.models import Share
from dividends.models import Dividend
from servicecharges.models import AppliedServiceCharge

logger = logging.getLogger(__name__)

SAVING = "saving"
SHARE = "share"
DIVIDEND = "dividend"
SERVICE_CHARGE = "service_charge"

TRANSACTION_MODELS = {
    SAVING: Saving,
    SHARE: Share,
    DIVIDEND: Dividend,
    SERVICE_CHARGE: AppliedServiceCharge,
}


@dataclass(frozen=True)
class PendingTransaction:
    """One entry of the approval queue, whatever the underlying record."""

    kind: str
    reference: str
    label: str
    member_no: str
    member_name: str
    amount: Decimal
    date: date
    description: Optional[str]
    created_at: datetime

    def to_dict(self):
        return asdict(self)


def _from_saving(saving):
    return PendingTransaction(
        kind=SAVING,
        reference=saving.reference,
        label=saving.get_transaction_type_display(),
        member_no=saving.member.member_no,
        member_name=saving.member.full_name,
        amount=saving.amount,
        date=saving.date,
        description=saving.notes or f"Account {saving.savings_account.account_number}",
        created_at=saving.created_at,
    )


def _from_share(share):
    return PendingTransaction(
        kind=SHARE,
        reference=share.reference,
        label=f"Share {share.get_transaction_type_display()}",
        member_no=share.member.member_no,
        member_name=share.member.full_name,
        amount=share.total_value_allocated,
        date=share.allocation_date,
        description=f"{share.count} x {share.share_type.name}",
        created_at=share.created_at,
    )


def _from_dividend(dividend):
    return PendingTransaction(
        kind=DIVIDEND,
        reference=dividend.reference,
        label="Dividend",
        member_no=dividend.member.member_no,
        member_name=dividend.member.full_name,
        amount=dividend.amount,
        date=dividend.distribution_date,
        description=dividend.notes,
        created_at=dividend.created_at,
    )


def _from_service_charge(charge):
    return PendingTransaction(
        kind=SERVICE_CHARGE,
        reference=charge.reference,
        label="Service Charge",
        member_no=charge.member.member_no,
        member_name=charge.member.full_name,
        amount=charge.amount_charged,
        date=charge.date_applied,
        description=charge.notes or charge.service_charge_type_name,
        created_at=charge.created_at,
    )


CONVERTERS = {
    SAVING: (_from_saving, ("member", "savings_account")),
    SHARE: (_from_share, ("member", "share_type")),
    DIVIDEND: (_from_dividend, ("member",)),
    SERVICE_CHARGE: (_from_service_charge, ("member",)),
}


def get_model(kind):
    try:
        return TRANSACTION_MODELS[kind]
    except KeyError:
        raise serializers.ValidationError(
            {"kind": f"Unknown transaction kind '{kind}'."}
        )


def pending_transactions(kind=None):
    """The approval queue, oldest first."""
    kinds = [kind] if kind else list(TRANSACTION_MODELS)
    entries = []
    for name in kinds:
        model = get_model(name)
        convert, related = CONVERTERS[name]
        queryset = model.objects.filter(status=model.PENDING).select_related(*related)
        entries.extend(convert(obj) for obj in queryset)
    return sorted(entries, key=lambda entry: (entry.date, entry.created_at))


def get_transaction(kind, reference):
    model = get_model(kind)
    try:
        return model.objects.select_related("member").get(reference=reference)
    except model.DoesNotExist:
        raise NotFound(f"No {kind} transaction with reference {reference}.")


def send_transaction_status_email(kind, obj):
    member = obj.member
    if not member.email:
        return None
    entry = CONVERTERS[kind][0](obj)
    return send_email(
        member.email,
        f"{entry.label} {obj.get_status_display()}",
        "transaction_status.html",
        {"member": member, "entry": entry, "transaction": obj},
    )


def _notify_on_commit(kind, obj):
    transaction.on_commit(lambda: send_transaction_status_email(kind, obj))


def approve_transaction(kind, reference, user=None):
    obj = get_transaction(kind, reference)
    obj.approve(user)
    _notify_on_commit(kind, obj)
    return obj


def reject_transaction(kind, reference, reason, user=None):
    obj = get_transaction(kind, reference)
    obj.reject(reason, user)
    _notify_on_commit(kind, obj)
    return obj


def bulk_approve(items, user=None):
    """Approve every item or none of them."""
    with transaction.atomic():
        approved = [
            approve_transaction(item["kind"], item["reference"], user) for item in items
        ]
    logger.info(f"Bulk approved {len(approved)} transactions")
    return approved


def bulk_reject(items, reason, user=None):
    with transaction.atomic():
        rejected = [
            reject_transaction(item["kind"], item["reference"], reason, user)
            for item in items
        ]
    logger.info(f"Bulk rejected {len(rejected)} transactions")
    return rejected
