import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from members.models import Member, MemberShareCommitment
from savings.models import MemberSavingAccount
from savings.calculators import monthly_rate
from savingstransactions.models import Saving
from shares.models import Share
from shares.utils import share_holdings

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def calculate_final_payout(member):
    """
    What a member leaving the SACCO is owed: savings on every account, the
    value of shares still held, and half a month of interest at each account
    type's rate.
    """

    current_balance = Decimal("0")
    accrued_interest = Decimal("0")
    accounts = []

    for account in member.savings_accounts.select_related("account_type"):
        interest = (
            account.balance * monthly_rate(account.account_type.interest_rate) / 2
        ).quantize(CENTS, ROUND_HALF_UP)
        if interest < 0:
            interest = Decimal("0.00")
        current_balance += account.balance
        accrued_interest += interest
        accounts.append(
            {
                "account": account,
                "balance": account.balance,
                "accrued_interest": interest,
            }
        )

    holdings = share_holdings(member)
    total_shares_paid = sum((value for _, _, value in holdings), Decimal("0"))

    current_balance = current_balance.quantize(CENTS, ROUND_HALF_UP)
    accrued_interest = accrued_interest.quantize(CENTS, ROUND_HALF_UP)
    total_shares_paid = Decimal(total_shares_paid).quantize(CENTS, ROUND_HALF_UP)

    return {
        "current_balance": current_balance,
        "total_shares_paid": total_shares_paid,
        "accrued_interest": accrued_interest,
        "total_payout": current_balance + total_shares_paid + accrued_interest,
        "accounts": accounts,
        "shares": holdings,
    }


def confirm_account_closure(
    member,
    deposit_mode,
    source_name=None,
    transaction_reference=None,
    evidence_url=None,
    user=None,
):
    """
    Post the closing interest, the savings payout and the share refund, cancel
    share commitments, then mark the member inactive. Everything commits
    together or not at all.
    """

    now = timezone.now()
    today = timezone.localdate()

    with transaction.atomic():
        member = Member.objects.select_for_update().get(pk=member.pk)
        if not member.is_active:
            raise serializers.ValidationError(
                {"detail": "This member's account is already closed."}
            )
        list(MemberSavingAccount.objects.select_for_update().filter(member=member))

        if (
            Saving.objects.filter(member=member, status=Saving.PENDING).exists()
            or Share.objects.filter(member=member, status=Share.PENDING).exists()
        ):
            raise serializers.ValidationError(
                {
                    "detail": "Member has pending savings or share transactions. Approve or reject them before closing the account."
                }
            )

        # Balances are read under the locks above
        payout = calculate_final_payout(member)

        for entry in payout["accounts"]:
            account = entry["account"]
            interest = entry["accrued_interest"]

            if interest > 0:
                Saving.objects.create(
                    member=member,
                    savings_account=account,
                    amount=interest,
                    date=today,
                    transaction_type=Saving.DEPOSIT,
                    notes="Final interest on account closure.",
                    deposit_mode="Bank",
                    source_name="Internal System Posting",
                    transaction_reference=f"CLOSURE-INT-{account.account_number}",
                    recorded_by=user,
                ).approve(user)

            payout_amount = entry["balance"] + interest
            if payout_amount > 0:
                Saving.objects.create(
                    member=member,
                    savings_account=account,
                    amount=payout_amount,
                    date=today,
                    transaction_type=Saving.WITHDRAWAL,
                    notes=f"Savings payout on account closure via {deposit_mode}.",
                    deposit_mode=deposit_mode,
                    source_name=source_name,
                    transaction_reference=transaction_reference,
                    evidence_url=evidence_url or None,
                    recorded_by=user,
                ).approve(user)

        for share_type, count, value in payout["shares"]:
            Share.objects.create(
                member=member,
                share_type=share_type,
                transaction_type=Share.REFUND,
                count=count,
                allocation_date=today,
                value_per_share=share_type.value_per_share,
                contribution_amount=value,
                total_value_allocated=value,
                deposit_mode=deposit_mode,
                source_name=source_name,
                transaction_reference=transaction_reference,
                evidence_url=evidence_url or None,
                notes="Share refund on account closure.",
                recorded_by=user,
            ).approve(user)

        member.share_commitments.update(status=MemberShareCommitment.CANCELLED)
        member.savings_accounts.update(is_active=False)
        Member.objects.filter(pk=member.pk).update(
            status=Member.INACTIVE, closure_date=now
        )

    member.refresh_from_db()
    logger.info(
        f"Closed account for member {member.member_no}, payout {payout['total_payout']}"
    )
    return member, payout
