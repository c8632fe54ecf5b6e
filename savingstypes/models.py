from django.db import models

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel


class SavingAccountType(UniversalIdModel, TimeStampedModel, ReferenceModel):
    CONTRIBUTION_TYPE_CHOICES = [
        ("fixed", "Fixed Amount"),
        ("percentage", "Percentage of Salary"),
    ]

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    # Annual rate in percent, e.g. 12.00 for 12%
    interest_rate = models.DecimalField(max_digits=6, decimal_places=2, default=0.00)
    contribution_type = models.CharField(
        max_length=20, choices=CONTRIBUTION_TYPE_CHOICES, default="fixed"
    )
    contribution_value = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )

    class Meta:
        verbose_name = "Saving Account Type"
        verbose_name_plural = "Saving Account Types"
        ordering = ["name"]

    def __str__(self):
        return self.name
