from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from rest_framework import serializers

from accounts.abstracts import (
    TimeStampedModel,
    UniversalIdModel,
    ReferenceModel,
    ApprovalModel,
)
from members.models import Member

LOAN_INTEREST_CHARGE_NAME = "Monthly Loan Interest"


class ServiceChargeType(UniversalIdModel, TimeStampedModel, ReferenceModel):
    FREQUENCY_CHOICES = [
        ("once", "Once"),
        ("monthly", "Monthly"),
        ("yearly", "Yearly"),
    ]

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    frequency = models.CharField(max_length=20, choices=FREQUENCY_CHOICES, default="once")

    class Meta:
        verbose_name = "Service Charge Type"
        verbose_name_plural = "Service Charge Types"
        ordering = ["name"]

    def __str__(self):
        return self.name


class AppliedServiceCharge(
    TimeStampedModel, UniversalIdModel, ReferenceModel, ApprovalModel
):
    PAID = "paid"

    STATUS_CHOICES = ApprovalModel.STATUS_CHOICES + [(PAID, "Paid")]

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=ApprovalModel.PENDING
    )
    member = models.ForeignKey(
        Member, on_delete=models.PROTECT, related_name="service_charges"
    )
    service_charge_type = models.ForeignKey(
        ServiceChargeType, on_delete=models.PROTECT, related_name="applied_charges"
    )
    service_charge_type_name = models.CharField(max_length=255, blank=True)
    amount_charged = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01, message="Amount must be greater than 0")],
    )
    date_applied = models.DateField()
    notes = models.TextField(blank=True, null=True)
    # Set only on system loan interest postings
    loan = models.ForeignKey(
        "loans.Loan",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="interest_charges",
    )
    interest_period = models.CharField(max_length=7, blank=True, null=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_service_charges",
    )

    label = "service charge"

    class Meta:
        verbose_name = "Applied Service Charge"
        verbose_name_plural = "Applied Service Charges"
        ordering = ["-date_applied", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["loan", "interest_period"],
                condition=Q(loan__isnull=False)
                & Q(interest_period__isnull=False)
                & ~Q(status="rejected"),
                name="unique_loan_interest_per_period",
            )
        ]

    def __str__(self):
        return f"{self.service_charge_type_name} {self.amount_charged} - {self.member.full_name}"

    def save(self, *args, **kwargs):
        if not self.service_charge_type_name and self.service_charge_type_id:
            self.service_charge_type_name = self.service_charge_type.name
        return super().save(*args, **kwargs)

    def ensure_editable(self):
        if self.status == self.PAID:
            raise serializers.ValidationError(
                {"detail": "Cannot modify a paid service charge."}
            )
        super().ensure_editable()
