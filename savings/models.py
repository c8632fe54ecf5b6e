from django.db import models
from django.db.models import F

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel
from members.models import Member
from savingstypes.models import SavingAccountType
from savings.utils import generate_account_number


class MemberSavingAccount(TimeStampedModel, UniversalIdModel, ReferenceModel):
    member = models.ForeignKey(
        Member, on_delete=models.CASCADE, related_name="savings_accounts"
    )
    account_type = models.ForeignKey(
        SavingAccountType, on_delete=models.PROTECT, related_name="savings_accounts"
    )
    account_number = models.CharField(
        max_length=20, unique=True, default=generate_account_number
    )
    initial_balance = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    # Running balance, mutated only by approved savings transactions
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    expected_monthly_saving = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = "Member Saving Account"
        verbose_name_plural = "Member Saving Accounts"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["member", "account_type"],
                name="unique_saving_account_per_type",
            )
        ]

    def __str__(self):
        return f"{self.account_number} - {self.member.full_name}"

    def save(self, *args, **kwargs):
        adding = self._state.adding
        if adding:
            self.balance = self.initial_balance
        super().save(*args, **kwargs)
        if adding and self.initial_balance:
            # Opening balances count towards the member total
            Member.objects.filter(pk=self.member_id).update(
                savings_balance=F("savings_balance") + self.initial_balance
            )
