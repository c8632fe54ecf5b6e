from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel
from loans.models import Loan
from members.models import Member


class LoanRepayment(TimeStampedModel, UniversalIdModel, ReferenceModel):
    """A recorded payment against a loan. Immutable once created."""

    DEPOSIT_MODE_CHOICES = [
        ("Cash", "Cash"),
        ("Bank", "Bank"),
        ("Wallet", "Wallet"),
    ]

    loan = models.ForeignKey(Loan, on_delete=models.PROTECT, related_name="repayments")
    member = models.ForeignKey(
        Member, on_delete=models.PROTECT, related_name="loan_repayments"
    )
    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01, message="Amount must be greater than 0")],
    )
    interest_paid = models.DecimalField(max_digits=12, decimal_places=2)
    principal_paid = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    payment_date = models.DateField()
    deposit_mode = models.CharField(
        max_length=20, choices=DEPOSIT_MODE_CHOICES, default="Cash"
    )
    source_name = models.CharField(max_length=255, blank=True, null=True)
    transaction_reference = models.CharField(max_length=100, blank=True, null=True)
    evidence_url = models.URLField(max_length=500, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_repayments",
    )

    class Meta:
        verbose_name = "Loan Repayment"
        verbose_name_plural = "Loan Repayments"
        ordering = ["-payment_date", "-created_at"]
        indexes = [
            models.Index(fields=["loan", "payment_date"]),
            models.Index(fields=["member", "payment_date"]),
        ]

    def __str__(self):
        return f"Repayment {self.reference} for Loan {self.loan.account_number} - Amount: {self.amount_paid}"
