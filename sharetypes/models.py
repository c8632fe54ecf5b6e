from django.db import models

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel


class ShareType(UniversalIdModel, TimeStampedModel, ReferenceModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    value_per_share = models.DecimalField(max_digits=12, decimal_places=2)
    expected_monthly_contribution = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )

    class Meta:
        verbose_name = "Share Type"
        verbose_name_plural = "Share Types"
        ordering = ["name"]

    def __str__(self):
        return self.name
