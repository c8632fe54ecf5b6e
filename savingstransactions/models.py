from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from rest_framework import serializers

from accounts.abstracts import (
    TimeStampedModel,
    UniversalIdModel,
    ReferenceModel,
    ApprovalModel,
)
from members.models import Member
from savings.models import MemberSavingAccount
from savings.calculators import month_label


class Saving(TimeStampedModel, UniversalIdModel, ReferenceModel, ApprovalModel):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    TRANSACTION_TYPE_CHOICES = [
        (DEPOSIT, "Deposit"),
        (WITHDRAWAL, "Withdrawal"),
    ]
    DEPOSIT_MODE_CHOICES = [
        ("Cash", "Cash"),
        ("Bank", "Bank"),
        ("Wallet", "Wallet"),
    ]

    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="savings")
    savings_account = models.ForeignKey(
        MemberSavingAccount, on_delete=models.PROTECT, related_name="transactions"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01, message="Amount must be greater than 0")],
    )
    date = models.DateField()
    month = models.CharField(max_length=30, blank=True)
    transaction_type = models.CharField(
        max_length=20, choices=TRANSACTION_TYPE_CHOICES, default=DEPOSIT
    )
    notes = models.TextField(blank=True, null=True)
    deposit_mode = models.CharField(
        max_length=20, choices=DEPOSIT_MODE_CHOICES, blank=True, null=True
    )
    source_name = models.CharField(max_length=255, blank=True, null=True)
    transaction_reference = models.CharField(max_length=100, blank=True, null=True)
    evidence_url = models.URLField(max_length=500, blank=True, null=True)
    # "YYYY-MM", set only on system interest postings
    interest_period = models.CharField(max_length=7, blank=True, null=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_savings",
    )

    label = "saving transaction"

    class Meta:
        verbose_name = "Saving"
        verbose_name_plural = "Savings"
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["savings_account", "date"]),
            models.Index(fields=["member", "status"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["savings_account", "interest_period"],
                condition=Q(interest_period__isnull=False) & ~Q(status="rejected"),
                name="unique_interest_posting_per_account_period",
            )
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} - {self.member.full_name}"

    @property
    def signed_amount(self):
        if self.transaction_type == self.WITHDRAWAL:
            return -self.amount
        return self.amount

    def save(self, *args, **kwargs):
        if not self.month and self.date:
            self.month = month_label(self.date.year, self.date.month)
        return super().save(*args, **kwargs)

    def apply_approval(self):
        account = MemberSavingAccount.objects.select_for_update().get(
            pk=self.savings_account_id
        )
        Member.objects.select_for_update().get(pk=self.member_id)

        if self.transaction_type == self.WITHDRAWAL and self.amount > account.balance:
            raise serializers.ValidationError(
                {
                    "amount": f"Insufficient balance. Account {account.account_number} holds {account.balance}."
                }
            )

        MemberSavingAccount.objects.filter(pk=account.pk).update(
            balance=F("balance") + self.signed_amount
        )
        Member.objects.filter(pk=self.member_id).update(
            savings_balance=F("savings_balance") + self.signed_amount
        )
