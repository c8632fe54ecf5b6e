from django.db import models

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel


class LoanType(TimeStampedModel, UniversalIdModel, ReferenceModel):
    REPAYMENT_FREQUENCY_CHOICES = [
        ("monthly", "Monthly"),
        ("quarterly", "Quarterly"),
        ("yearly", "Yearly"),
    ]

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    # Annual rates in percent
    interest_rate = models.DecimalField(max_digits=6, decimal_places=2, default=0.00)
    npl_interest_rate = models.DecimalField(
        max_digits=6, decimal_places=2, null=True, blank=True
    )
    loan_term = models.PositiveIntegerField(default=12)
    repayment_frequency = models.CharField(
        max_length=20, choices=REPAYMENT_FREQUENCY_CHOICES, default="monthly"
    )
    allow_concurrent_loans = models.BooleanField(default=False)
    min_loan_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    max_loan_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    min_repayment_period = models.PositiveIntegerField(default=1)
    max_repayment_period = models.PositiveIntegerField(default=12)
    # Insurance (1% of principal) and a flat service fee on disbursement
    charges_fees = models.BooleanField(default=False)

    class Meta:
        verbose_name = "Loan Type"
        verbose_name_plural = "Loan Types"
        ordering = ["name"]

    def __str__(self):
        return self.name
