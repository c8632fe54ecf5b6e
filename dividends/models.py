from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from accounts.abstracts import (
    TimeStampedModel,
    UniversalIdModel,
    ReferenceModel,
    ApprovalModel,
)
from members.models import Member


class Dividend(TimeStampedModel, UniversalIdModel, ReferenceModel, ApprovalModel):
    member = models.ForeignKey(
        Member, on_delete=models.PROTECT, related_name="dividends"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0.01, message="Amount must be greater than 0")],
    )
    distribution_date = models.DateField()
    share_count_at_distribution = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True, null=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_dividends",
    )

    label = "dividend"

    class Meta:
        verbose_name = "Dividend"
        verbose_name_plural = "Dividends"
        ordering = ["-distribution_date", "-created_at"]

    def __str__(self):
        return f"Dividend {self.amount} - {self.member.full_name}"
