"""
Guards against posting the same month's interest twice.

A posting is identified by its notes string (the historical marker) or by
its ``interest_period``. Rejected postings do not count, so a rejected
month can be posted again.
"""
from savingstransactions.models import Saving
from servicecharges.models import AppliedServiceCharge
from savings.calculators import month_label, interest_period


def savings_interest_notes(year, month):
    return f"Interest posting for {month_label(year, month)}"


def loan_interest_notes(year, month, loan):
    return f"Monthly loan interest for {month_label(year, month)} on Loan {loan.account_number}"


def already_posted_savings_interest(account, year, month):
    period = interest_period(year, month)
    notes = savings_interest_notes(year, month)
    return (
        Saving.objects.filter(savings_account=account)
        .exclude(status=Saving.REJECTED)
        .filter(interest_period=period)
        .exists()
        or Saving.objects.filter(savings_account=account, notes=notes)
        .exclude(status=Saving.REJECTED)
        .exists()
    )


def already_posted_loan_interest(loan, year, month):
    period = interest_period(year, month)
    return (
        AppliedServiceCharge.objects.filter(loan=loan, interest_period=period)
        .exclude(status=AppliedServiceCharge.REJECTED)
        .exists()
        or AppliedServiceCharge.objects.filter(
            loan=loan, notes=loan_interest_notes(year, month, loan)
        )
        .exclude(status=AppliedServiceCharge.REJECTED)
        .exists()
    )
