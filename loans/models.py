from datetime import date

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone
from rest_framework import serializers

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel
from members.models import Member
from loantypes.models import LoanType
from loans.utils import generate_loan_account_number
from loanrepayments.calculators import next_due_date


class Loan(TimeStampedModel, UniversalIdModel, ReferenceModel):
    PENDING = "pending"
    ACTIVE = "active"
    OVERDUE = "overdue"
    PAID_OFF = "paid_off"
    REJECTED = "rejected"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (ACTIVE, "Active"),
        (OVERDUE, "Overdue"),
        (PAID_OFF, "Paid Off"),
        (REJECTED, "Rejected"),
    ]
    OPEN_STATUSES = [ACTIVE, OVERDUE]

    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="loans")
    loan_type = models.ForeignKey(
        LoanType, on_delete=models.PROTECT, related_name="loans"
    )
    account_number = models.CharField(
        max_length=20, unique=True, default=generate_loan_account_number
    )
    principal_amount = models.DecimalField(max_digits=12, decimal_places=2)
    remaining_balance = models.DecimalField(max_digits=12, decimal_places=2)
    # Copied from the loan type when the loan is created
    interest_rate = models.DecimalField(max_digits=6, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    loan_term = models.PositiveIntegerField()
    repayment_frequency = models.CharField(
        max_length=20, choices=LoanType.REPAYMENT_FREQUENCY_CHOICES, default="monthly"
    )
    disbursement_date = models.DateField()
    next_due_date = models.DateField(null=True, blank=True)
    monthly_repayment_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )
    service_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    insurance_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    purpose = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    rejection_reason = models.TextField(blank=True, null=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_loans",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_loans",
    )

    class Meta:
        verbose_name = "Loan"
        verbose_name_plural = "Loans"
        ordering = ["-disbursement_date", "-created_at"]
        indexes = [
            models.Index(fields=["status", "next_due_date"]),
            models.Index(fields=["member", "status"]),
        ]

    def __str__(self):
        return f"{self.account_number} - {self.member.full_name}"

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES

    @property
    def effective_interest_rate(self):
        """Overdue loans accrue at the loan type's NPL rate when one is set."""
        if self.status == self.OVERDUE and self.loan_type.npl_interest_rate is not None:
            return self.loan_type.npl_interest_rate
        return self.interest_rate

    def days_overdue(self, today=None):
        today = today or date.today()
        if not self.next_due_date or self.next_due_date >= today:
            return 0
        return (today - self.next_due_date).days

    def approve(self, user=None):
        due = self.next_due_date or next_due_date(
            self.disbursement_date, self.repayment_frequency
        )
        with transaction.atomic():
            updated = Loan.objects.filter(pk=self.pk, status=self.PENDING).update(
                status=self.ACTIVE,
                next_due_date=due,
                approved_by=user,
                approved_at=timezone.now(),
                rejection_reason=None,
            )
            if not updated:
                raise serializers.ValidationError(
                    {"status": "Only pending loans can be approved."}
                )
        self.refresh_from_db()
        return self

    def reject(self, reason, user=None):
        if not reason or not str(reason).strip():
            raise serializers.ValidationError(
                {"reason": "A reason is required to reject a loan."}
            )
        updated = Loan.objects.filter(pk=self.pk, status=self.PENDING).update(
            status=self.REJECTED,
            rejection_reason=str(reason).strip(),
            approved_by=user,
            approved_at=timezone.now(),
        )
        if not updated:
            raise serializers.ValidationError(
                {"status": "Only pending loans can be rejected."}
            )
        self.refresh_from_db()
        return self


class LoanGuarantor(TimeStampedModel, UniversalIdModel):
    loan = models.ForeignKey(Loan, on_delete=models.CASCADE, related_name="guarantors")
    guarantor = models.ForeignKey(
        Member, on_delete=models.PROTECT, related_name="guaranteed_loans"
    )

    class Meta:
        verbose_name = "Loan Guarantor"
        verbose_name_plural = "Loan Guarantors"
        constraints = [
            models.UniqueConstraint(
                fields=["loan", "guarantor"], name="unique_guarantor_per_loan"
            )
        ]

    def __str__(self):
        return f"{self.guarantor.full_name} guarantees {self.loan.account_number}"


class Collateral(TimeStampedModel, UniversalIdModel):
    GUARANTOR = "GUARANTOR"
    TITLE_DEED = "TITLE_DEED"

    TYPE_CHOICES = [
        (GUARANTOR, "Guarantor"),
        (TITLE_DEED, "Title Deed"),
    ]

    loan = models.ForeignKey(Loan, on_delete=models.CASCADE, related_name="collaterals")
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    description = models.TextField(blank=True, null=True)
    document_url = models.URLField(max_length=500, blank=True, null=True)

    class Meta:
        verbose_name = "Collateral"
        verbose_name_plural = "Collaterals"

    def __str__(self):
        return f"{self.get_type_display()} for {self.loan.account_number}"
