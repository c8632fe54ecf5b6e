from django.db import models

from accounts.abstracts import TimeStampedModel, UniversalIdModel, ReferenceModel
from accounts.utils import generate_member_number
from schools.models import School
from savingstypes.models import SavingAccountType
from sharetypes.models import ShareType


class Member(TimeStampedModel, UniversalIdModel, ReferenceModel):
    ACTIVE = "active"
    INACTIVE = "inactive"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (INACTIVE, "Inactive"),
    ]
    SEX_CHOICES = [
        ("Male", "Male"),
        ("Female", "Female"),
        ("Other", "Other"),
    ]

    member_no = models.CharField(
        max_length=20, unique=True, default=generate_member_number
    )
    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True, blank=True, null=True)
    sex = models.CharField(max_length=10, choices=SEX_CHOICES)
    phone_number = models.CharField(max_length=25, blank=True, null=True)
    school = models.ForeignKey(
        School, on_delete=models.PROTECT, related_name="members"
    )
    join_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)
    closure_date = models.DateTimeField(null=True, blank=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    saving_account_type = models.ForeignKey(
        SavingAccountType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    expected_monthly_saving = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )

    # Aggregates, mutated only by approvals
    savings_balance = models.DecimalField(max_digits=12, decimal_places=2, default=0.00)
    shares_count = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Member"
        verbose_name_plural = "Members"
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.member_no} - {self.full_name}"

    @property
    def is_active(self):
        return self.status == self.ACTIVE


class Address(TimeStampedModel, UniversalIdModel):
    member = models.OneToOneField(
        Member, on_delete=models.CASCADE, related_name="address"
    )
    city = models.CharField(max_length=255, blank=True, null=True)
    sub_city = models.CharField(max_length=255, blank=True, null=True)
    wereda = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        verbose_name = "Address"
        verbose_name_plural = "Addresses"

    def __str__(self):
        return f"{self.city}, {self.sub_city}"


class EmergencyContact(TimeStampedModel, UniversalIdModel):
    member = models.OneToOneField(
        Member, on_delete=models.CASCADE, related_name="emergency_contact"
    )
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=25)

    class Meta:
        verbose_name = "Emergency Contact"
        verbose_name_plural = "Emergency Contacts"

    def __str__(self):
        return f"{self.name} ({self.phone})"


class MemberShareCommitment(TimeStampedModel, UniversalIdModel):
    ACTIVE = "active"
    CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (CANCELLED, "Cancelled"),
    ]

    member = models.ForeignKey(
        Member, on_delete=models.CASCADE, related_name="share_commitments"
    )
    share_type = models.ForeignKey(
        ShareType, on_delete=models.PROTECT, related_name="commitments"
    )
    monthly_committed_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=0.00
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)

    class Meta:
        verbose_name = "Member Share Commitment"
        verbose_name_plural = "Member Share Commitments"
        constraints = [
            models.UniqueConstraint(
                fields=["member", "share_type"], name="unique_member_share_commitment"
            )
        ]

    def __str__(self):
        return f"{self.member.full_name} - {self.share_type.name}: {self.monthly_committed_amount}"
