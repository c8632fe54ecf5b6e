from django.conf import settings
from django.db import models
from django.db.models import F
from rest_framework import serializers

from accounts.abstracts import (
    TimeStampedModel,
    UniversalIdModel,
    ReferenceModel,
    ApprovalModel,
)
from members.models import Member
from sharetypes.models import ShareType


class Share(TimeStampedModel, UniversalIdModel, ReferenceModel, ApprovalModel):
    ALLOCATION = "allocation"
    REFUND = "refund"

    TRANSACTION_TYPE_CHOICES = [
        (ALLOCATION, "Allocation"),
        (REFUND, "Refund"),
    ]
    DEPOSIT_MODE_CHOICES = [
        ("Cash", "Cash"),
        ("Bank", "Bank"),
        ("Wallet", "Wallet"),
    ]

    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="shares")
    share_type = models.ForeignKey(
        ShareType, on_delete=models.PROTECT, related_name="shares"
    )
    transaction_type = models.CharField(
        max_length=20, choices=TRANSACTION_TYPE_CHOICES, default=ALLOCATION
    )
    count = models.PositiveIntegerField()
    allocation_date = models.DateField()
    # Snapshot of the share type's value when allocated
    value_per_share = models.DecimalField(max_digits=12, decimal_places=2)
    contribution_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total_value_allocated = models.DecimalField(max_digits=12, decimal_places=2)
    deposit_mode = models.CharField(
        max_length=20, choices=DEPOSIT_MODE_CHOICES, blank=True, null=True
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
        related_name="recorded_shares",
    )

    label = "share allocation"

    class Meta:
        verbose_name = "Share"
        verbose_name_plural = "Shares"
        ordering = ["-allocation_date", "-created_at"]

    def __str__(self):
        return f"{self.count} x {self.share_type.name} - {self.member.full_name}"

    @property
    def signed_count(self):
        if self.transaction_type == self.REFUND:
            return -self.count
        return self.count

    def apply_approval(self):
        member = Member.objects.select_for_update().get(pk=self.member_id)
        if self.transaction_type == self.REFUND and self.count > member.shares_count:
            raise serializers.ValidationError(
                {"count": f"Member only holds {member.shares_count} shares."}
            )
        Member.objects.filter(pk=self.member_id).update(
            shares_count=F("shares_count") + self.signed_count
        )
