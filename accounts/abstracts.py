import uuid
import logging

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone
from rest_framework import serializers

from accounts.utils import generate_reference

logger = logging.getLogger(__name__)


class UniversalIdModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ReferenceModel(models.Model):
    reference = models.CharField(
        max_length=50, unique=True, default=generate_reference, editable=False
    )

    class Meta:
        abstract = True


class ApprovalModel(models.Model):
    """
    Three-state lifecycle shared by every financial transaction record.

    pending -> approved applies the financial effect (apply_approval) in the
    same database transaction as the status flip. pending -> rejected stores
    a reason and has no effect. Approved records are immutable.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    rejection_reason = models.TextField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    label = "transaction"

    class Meta:
        abstract = True

    @property
    def is_approved(self):
        return self.status == self.APPROVED

    def apply_approval(self):
        """Apply the financial effect of this record. Runs inside approve()."""

    def approve(self, user=None):
        with transaction.atomic():
            # Conditional flip: a concurrent approval finds nothing to update.
            updated = type(self).objects.filter(
                pk=self.pk, status=self.PENDING
            ).update(
                status=self.APPROVED,
                reviewed_by=user,
                reviewed_at=timezone.now(),
                rejection_reason=None,
            )
            if not updated:
                raise serializers.ValidationError(
                    {"status": f"This {self.label} is not pending approval."}
                )
            self.refresh_from_db()
            self.apply_approval()

        logger.info(f"Approved {self.label} {self.reference}")
        return self

    def reject(self, reason, user=None):
        if not reason or not str(reason).strip():
            raise serializers.ValidationError(
                {"reason": "A reason is required to reject a transaction."}
            )
        updated = type(self).objects.filter(pk=self.pk, status=self.PENDING).update(
            status=self.REJECTED,
            rejection_reason=str(reason).strip(),
            reviewed_by=user,
            reviewed_at=timezone.now(),
        )
        if not updated:
            raise serializers.ValidationError(
                {"status": f"This {self.label} is not pending approval."}
            )
        self.refresh_from_db()
        logger.info(f"Rejected {self.label} {self.reference}: {self.rejection_reason}")
        return self

    def ensure_editable(self):
        if self.status == self.APPROVED:
            raise serializers.ValidationError(
                {"detail": f"Cannot modify an approved {self.label}."}
            )

    def resubmit(self):
        """Editing a pending or rejected record sends it back for approval."""
        self.ensure_editable()
        self.status = self.PENDING
        self.rejection_reason = None
        self.reviewed_by = None
        self.reviewed_at = None
