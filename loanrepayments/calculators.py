# calculators.py
from decimal import Decimal, ROUND_HALF_UP
from datetime import date
from typing import NamedTuple
from dateutil.relativedelta import relativedelta

CENTS = Decimal("0.01")

# ----------------------------------------------------------------------
# Helper: date stepping
# ----------------------------------------------------------------------
DELTA = {
    "monthly": relativedelta(months=1),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}


class RepaymentAllocation(NamedTuple):
    interest_paid: Decimal
    principal_paid: Decimal
    new_balance: Decimal
    interest_due: Decimal

    @property
    def is_paid_off(self) -> bool:
        return self.new_balance <= 0


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def next_due_date(current: date, repayment_frequency: str = "monthly") -> date:
    if repayment_frequency not in DELTA:
        raise ValueError(f"Unknown repayment frequency: {repayment_frequency}")
    return current + DELTA[repayment_frequency]


# ----------------------------------------------------------------------
# Interest for one period on the outstanding balance
# ----------------------------------------------------------------------
def interest_due(remaining_balance, annual_rate) -> Decimal:
    balance = _to_decimal(remaining_balance)
    rate = _to_decimal(annual_rate)
    if rate < 0:
        raise ValueError("annual_rate must be >= 0")
    if balance <= 0:
        return Decimal("0.00")
    return (balance * rate / 100 / 12).quantize(CENTS, ROUND_HALF_UP)


def payoff_amount(remaining_balance, annual_rate) -> Decimal:
    """Everything needed to settle the loan this period."""
    return _to_decimal(remaining_balance) + interest_due(remaining_balance, annual_rate)


def minimum_instalment(principal, term, remaining_balance, annual_rate) -> Decimal:
    """
    One period's share of the principal plus the interest due, never more
    than what it takes to pay the loan off.
    """
    if int(term) <= 0:
        raise ValueError("term must be > 0")
    base = (_to_decimal(principal) / int(term)).quantize(CENTS, ROUND_HALF_UP)
    instalment = base + interest_due(remaining_balance, annual_rate)
    return min(instalment, payoff_amount(remaining_balance, annual_rate))


def estimate_monthly_repayment(principal, annual_rate, term) -> Decimal:
    """Equal principal portions plus the first period's interest."""
    return minimum_instalment(principal, term, principal, annual_rate)


# ----------------------------------------------------------------------
# Allocation: interest first, the rest reduces principal
# ----------------------------------------------------------------------
def allocate_repayment(remaining_balance, annual_rate, amount_paid) -> RepaymentAllocation:
    amount = _to_decimal(amount_paid)
    if amount <= 0:
        raise ValueError("amount_paid must be > 0")

    balance = _to_decimal(remaining_balance)
    due = interest_due(balance, annual_rate)

    interest_paid = min(amount, due)
    principal_paid = amount - interest_paid
    new_balance = balance - principal_paid

    return RepaymentAllocation(
        interest_paid=interest_paid,
        principal_paid=principal_paid,
        new_balance=new_balance,
        interest_due=due,
    )
