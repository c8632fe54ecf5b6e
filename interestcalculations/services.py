import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import IntegrityError, transaction
from rest_framework import serializers

from members.models import Member
from savings.models import MemberSavingAccount
from savings.calculators import (
    average_daily_balance,
    calculate_monthly_interest,
    interest_period,
    month_bounds,
    month_label,
    monthly_rate,
)
from savingstransactions.models import Saving
from loans.models import Loan
from servicecharges.models import (
    AppliedServiceCharge,
    ServiceChargeType,
    LOAN_INTEREST_CHARGE_NAME,
)
from interestcalculations.utils import (
    already_posted_loan_interest,
    already_posted_savings_interest,
    loan_interest_notes,
    savings_interest_notes,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

SAVINGS_SCOPES = ("all", "school", "member", "accountType")
LOAN_SCOPES = ("all", "school", "member", "loanType")


def _require_scope_value(scope, scope_value, scopes):
    if scope not in scopes:
        raise serializers.ValidationError(
            {"scope": f"Scope must be one of: {', '.join(scopes)}."}
        )
    if scope != "all" and not scope_value:
        raise serializers.ValidationError(
            {"scope_value": f"A value is required for the '{scope}' scope."}
        )


# ----------------------------------------------------------------------
# Savings interest
# ----------------------------------------------------------------------
def savings_accounts_in_scope(scope, scope_value=None):
    _require_scope_value(scope, scope_value, SAVINGS_SCOPES)
    accounts = MemberSavingAccount.objects.filter(
        member__status=Member.ACTIVE, account_type__interest_rate__gt=0
    ).select_related("member", "account_type")

    if scope == "school":
        accounts = accounts.filter(member__school__reference=scope_value)
    elif scope == "member":
        accounts = accounts.filter(member__member_no=scope_value)
    elif scope == "accountType":
        accounts = accounts.filter(account_type__name=scope_value)
    return accounts.order_by("member__full_name", "account_number")


def calculate_savings_interest(year, month, scope="all", scope_value=None):
    """
    Average-daily-balance interest for every account in scope. Results with
    no positive interest are dropped; already-posted accounts are flagged.
    """
    _, end, _ = month_bounds(year, month)
    results = []

    for account in savings_accounts_in_scope(scope, scope_value):
        transactions = list(
            Saving.objects.filter(
                savings_account=account, status=Saving.APPROVED, date__lte=end
            ).order_by("date")
        )
        rate = account.account_type.interest_rate
        interest = calculate_monthly_interest(
            account.initial_balance, transactions, year, month, rate
        )
        if interest <= 0:
            continue

        average = average_daily_balance(
            account.initial_balance, transactions, year, month
        ).quantize(CENTS, ROUND_HALF_UP)
        results.append(
            {
                "account": account,
                "member_no": account.member.member_no,
                "full_name": account.member.full_name,
                "account_number": account.account_number,
                "account_type": account.account_type.name,
                "savings_balance": account.balance,
                "average_daily_balance": average,
                "interest_rate": rate,
                "calculated_interest": interest,
                "already_posted": already_posted_savings_interest(account, year, month),
            }
        )
    return results


def post_savings_interest(year, month, scope="all", scope_value=None, user=None):
    """
    Recompute and create one pending interest deposit per account, dated on
    the last day of the month. Accounts already posted for the month are
    skipped.
    """
    _, end, _ = month_bounds(year, month)
    notes = savings_interest_notes(year, month)
    period = interest_period(year, month)

    created = []
    skipped = []

    for result in calculate_savings_interest(year, month, scope, scope_value):
        account = result["account"]
        if result["already_posted"]:
            logger.warning(
                f"Interest for {period} already posted on {account.account_number}, skipping"
            )
            skipped.append(account.account_number)
            continue
        try:
            with transaction.atomic():
                saving = Saving.objects.create(
                    member=account.member,
                    savings_account=account,
                    amount=result["calculated_interest"],
                    date=end,
                    month=month_label(year, month),
                    transaction_type=Saving.DEPOSIT,
                    notes=notes,
                    deposit_mode="Bank",
                    source_name="Internal System Posting",
                    transaction_reference=f"INT-{end:%Y%m%d}-{account.account_number[-6:]}",
                    interest_period=period,
                    recorded_by=user,
                )
        except IntegrityError:
            # A concurrent run posted this account first
            logger.warning(
                f"Interest for {period} on {account.account_number} was posted concurrently, skipping"
            )
            skipped.append(account.account_number)
            continue
        created.append(saving)

    logger.info(
        f"Savings interest for {period}: {len(created)} posted, {len(skipped)} skipped"
    )
    return created, skipped


# ----------------------------------------------------------------------
# Loan interest
# ----------------------------------------------------------------------
def loans_in_scope(scope, scope_value=None):
    _require_scope_value(scope, scope_value, LOAN_SCOPES)
    loans = Loan.objects.filter(
        status__in=Loan.OPEN_STATUSES, remaining_balance__gt=0, interest_rate__gt=0
    ).select_related("member", "loan_type")

    if scope == "school":
        loans = loans.filter(member__school__reference=scope_value)
    elif scope == "member":
        loans = loans.filter(member__member_no=scope_value)
    elif scope == "loanType":
        loans = loans.filter(loan_type__name=scope_value)
    return loans.order_by("member__full_name", "account_number")


def calculate_loan_interest(year, month, scope="all", scope_value=None):
    month_bounds(year, month)
    results = []
    for loan in loans_in_scope(scope, scope_value):
        rate = loan.effective_interest_rate
        interest = (loan.remaining_balance * monthly_rate(rate)).quantize(
            CENTS, ROUND_HALF_UP
        )
        if interest <= 0:
            continue
        results.append(
            {
                "loan": loan,
                "member_no": loan.member.member_no,
                "full_name": loan.member.full_name,
                "loan_account_number": loan.account_number,
                "status": loan.status,
                "remaining_balance": loan.remaining_balance,
                "interest_rate": rate,
                "calculated_interest": interest,
                "already_posted": already_posted_loan_interest(loan, year, month),
            }
        )
    return results


def post_loan_interest(year, month, scope="all", scope_value=None, user=None):
    try:
        charge_type = ServiceChargeType.objects.get(name=LOAN_INTEREST_CHARGE_NAME)
    except ServiceChargeType.DoesNotExist:
        raise serializers.ValidationError(
            {
                "detail": f'A service charge type named "{LOAN_INTEREST_CHARGE_NAME}" must exist to post charges.'
            }
        )

    _, end, _ = month_bounds(year, month)
    period = interest_period(year, month)
    created = []
    skipped = []

    for result in calculate_loan_interest(year, month, scope, scope_value):
        loan = result["loan"]
        if result["already_posted"]:
            logger.warning(
                f"Loan interest for {period} already posted on {loan.account_number}, skipping"
            )
            skipped.append(loan.account_number)
            continue
        try:
            with transaction.atomic():
                charge = AppliedServiceCharge.objects.create(
                    member=loan.member,
                    service_charge_type=charge_type,
                    service_charge_type_name=charge_type.name,
                    amount_charged=result["calculated_interest"],
                    date_applied=end,
                    notes=loan_interest_notes(year, month, loan),
                    loan=loan,
                    interest_period=period,
                    recorded_by=user,
                )
        except IntegrityError:
            logger.warning(
                f"Loan interest for {period} on {loan.account_number} was posted concurrently, skipping"
            )
            skipped.append(loan.account_number)
            continue
        created.append(charge)

    logger.info(
        f"Loan interest for {period}: {len(created)} posted, {len(skipped)} skipped"
    )
    return created, skipped
