# calculators.py
"""
Savings balance and interest arithmetic.

Functions here are pure: they take an opening balance and an iterable of
transactions and never touch the database. A transaction is any object with
``date``, ``amount`` and ``transaction_type`` ("deposit" or "withdrawal")
attributes, so both ``Saving`` rows and plain records work.
"""
import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

DEPOSIT = "deposit"
WITHDRAWAL = "withdrawal"

CENTS = Decimal("0.01")


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def signed_amount(txn) -> Decimal:
    amount = _to_decimal(txn.amount)
    if txn.transaction_type == WITHDRAWAL:
        return -amount
    if txn.transaction_type == DEPOSIT:
        return amount
    raise ValueError(f"Unknown transaction type: {txn.transaction_type}")


# ----------------------------------------------------------------------
# Balance reconstruction
# ----------------------------------------------------------------------
def reconstruct_balance(initial_balance, transactions: Iterable, as_of_date) -> Decimal:
    """
    Balance at the start of ``as_of_date``: the initial balance plus every
    transaction dated strictly before it. Transactions on ``as_of_date``
    itself are not counted.
    """
    as_of_date = _as_date(as_of_date)
    balance = _to_decimal(initial_balance)
    for txn in transactions:
        if _as_date(txn.date) < as_of_date:
            balance += signed_amount(txn)
    return balance


# ----------------------------------------------------------------------
# Calendar helpers
# ----------------------------------------------------------------------
def month_bounds(year: int, month: int) -> Tuple[date, date, int]:
    """First day, last day and day count of a 1-based calendar month."""
    if not 1 <= int(month) <= 12:
        raise ValueError("month must be between 1 and 12")
    days = calendar.monthrange(int(year), int(month))[1]
    start = date(int(year), int(month), 1)
    end = date(int(year), int(month), days)
    return start, end, days


def month_label(year: int, month: int) -> str:
    """e.g. 'January 2024'."""
    start, _, _ = month_bounds(year, month)
    return start.strftime("%B %Y")


def interest_period(year: int, month: int) -> str:
    """e.g. '2024-01'."""
    start, _, _ = month_bounds(year, month)
    return start.strftime("%Y-%m")


def monthly_rate(annual_rate) -> Decimal:
    rate = _to_decimal(annual_rate)
    if rate < 0:
        raise ValueError("annual_rate must be >= 0")
    return rate / 100 / 12


# ----------------------------------------------------------------------
# Average daily balance
# ----------------------------------------------------------------------
def average_daily_balance(
    initial_balance, transactions: Iterable, year: int, month: int
) -> Decimal:
    start, end, days = month_bounds(year, month)
    transactions = list(transactions)

    running = reconstruct_balance(initial_balance, transactions, start)

    movements = defaultdict(Decimal)
    for txn in transactions:
        txn_date = _as_date(txn.date)
        if start <= txn_date <= end:
            movements[txn_date] += signed_amount(txn)

    accumulated = Decimal("0")
    current = start
    while current <= end:
        running += movements.get(current, Decimal("0"))
        accumulated += running
        current += timedelta(days=1)

    return accumulated / days


def calculate_monthly_interest(
    initial_balance, transactions: Iterable, year: int, month: int, annual_rate
) -> Decimal:
    """
    Interest for one month on the average daily balance, rounded half-up to
    cents. ``annual_rate`` is a percentage (12 means 12% a year).
    """
    rate = monthly_rate(annual_rate)
    average = average_daily_balance(initial_balance, transactions, year, month)
    return (average * rate).quantize(CENTS, ROUND_HALF_UP)
