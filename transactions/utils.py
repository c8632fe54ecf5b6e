import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.db.models import Sum
from rest_framework import serializers

from members.models import Member, MemberShareCommitment
from schools.models import School
from savings.calculators import reconstruct_balance
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving

logger = logging.getLogger(__name__)


def build_account_statement(account, start_date, end_date):
    """
    Approved movements on one account between two dates, inclusive, with a
    running balance starting from the balance brought forward.
    """
    if start_date > end_date:
        raise serializers.ValidationError(
            {"start": "Start date must be on or before the end date."}
        )

    approved = list(
        Saving.objects.filter(
            savings_account=account, status=Saving.APPROVED, date__lte=end_date
        ).order_by("date", "created_at")
    )
    brought_forward = reconstruct_balance(account.initial_balance, approved, start_date)

    running = brought_forward
    lines = []
    for txn in approved:
        if txn.date < start_date:
            continue
        credit = txn.amount if txn.transaction_type == Saving.DEPOSIT else Decimal("0.00")
        debit = txn.amount if txn.transaction_type == Saving.WITHDRAWAL else Decimal("0.00")
        running += credit - debit
        lines.append(
            {
                "date": txn.date,
                "reference": txn.reference,
                "description": txn.notes or txn.get_transaction_type_display(),
                "credit": credit,
                "debit": debit,
                "balance": running,
            }
        )

    return {
        "member_no": account.member.member_no,
        "full_name": account.member.full_name,
        "school": account.member.school.name,
        "account_number": account.account_number,
        "account_type": account.account_type.name,
        "start_date": start_date,
        "end_date": end_date,
        "balance_brought_forward": brought_forward,
        "transactions": lines,
        "closing_balance": running,
    }


def collection_forecast(school, collection_type, type_name):
    """Expected monthly contribution per active member of a school."""
    members = Member.objects.filter(school=school, status=Member.ACTIVE)
    results = []

    if collection_type == "savings":
        members = members.filter(
            saving_account_type__name=type_name, expected_monthly_saving__gt=0
        )
        for member in members:
            results.append(
                {
                    "member_no": member.member_no,
                    "full_name": member.full_name,
                    "school": school.name,
                    "expected_contribution": member.expected_monthly_saving,
                }
            )
    elif collection_type == "shares":
        members = members.filter(
            share_commitments__share_type__name=type_name,
            share_commitments__monthly_committed_amount__gt=0,
            share_commitments__status=MemberShareCommitment.ACTIVE,
        ).prefetch_related("share_commitments__share_type")
        for member in members.distinct():
            commitment = next(
                c
                for c in member.share_commitments.all()
                if c.share_type.name == type_name
                and c.status == MemberShareCommitment.ACTIVE
            )
            results.append(
                {
                    "member_no": member.member_no,
                    "full_name": member.full_name,
                    "school": school.name,
                    "expected_contribution": commitment.monthly_committed_amount,
                }
            )
    else:
        raise serializers.ValidationError(
            {"collection_type": "Collection type must be 'savings' or 'shares'."}
        )

    return sorted(results, key=lambda r: r["full_name"])


def savings_trend(months=6, today=None):
    """Approved deposits per month for the last ``months`` months."""
    today = today or date.today()
    first = (today - relativedelta(months=months - 1)).replace(day=1)

    trend = OrderedDict()
    for offset in range(months):
        month_start = first + relativedelta(months=offset)
        trend[(month_start.year, month_start.month)] = {
            "month": month_start.strftime("%b %Y"),
            "savings": Decimal("0.00"),
        }

    deposits = Saving.objects.filter(
        status=Saving.APPROVED, transaction_type=Saving.DEPOSIT, date__gte=first
    ).values_list("date", "amount")
    for txn_date, amount in deposits:
        key = (txn_date.year, txn_date.month)
        if key in trend:
            trend[key]["savings"] += amount
    return list(trend.values())


def school_performance():
    performance = []
    for school in School.objects.all():
        active = school.members.filter(status=Member.ACTIVE)
        savings = MemberSavingAccount.objects.filter(member__in=active).aggregate(
            total=Sum("balance")
        )["total"] or Decimal("0.00")
        performance.append(
            {"name": school.name, "members": active.count(), "savings": savings}
        )
    return performance
