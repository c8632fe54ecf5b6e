from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from schools.models import School
from servicecharges.models import AppliedServiceCharge, ServiceChargeType

User = get_user_model()


class ServiceChargeTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        school = School.objects.create(name="Hillside Primary")
        self.member = Member.objects.create(
            full_name="Abebe Kebede",
            sex="Male",
            school=school,
            join_date=date(2023, 1, 1),
        )
        self.charge_type = ServiceChargeType.objects.create(
            name="Registration Fee", amount=Decimal("50.00")
        )
        self.client.force_authenticate(user=self.admin)

    def apply_charge(self, amount, day, approve=True):
        charge = AppliedServiceCharge.objects.create(
            member=self.member,
            service_charge_type=self.charge_type,
            service_charge_type_name=self.charge_type.name,
            amount_charged=Decimal(amount),
            date_applied=day,
        )
        if approve:
            charge.approve(self.admin)
        return charge

    def test_amount_defaults_to_the_charge_type(self):
        response = self.client.post(
            "/api/v1/servicecharges/",
            {
                "member": self.member.member_no,
                "service_charge_type": self.charge_type.name,
                "date_applied": "2024-01-10",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["amount_charged"], "50.00")
        self.assertEqual(response.data["status"], AppliedServiceCharge.PENDING)

    def test_payment_settles_oldest_charges_first(self):
        oldest = self.apply_charge("30.00", date(2024, 1, 1))
        middle = self.apply_charge("50.00", date(2024, 2, 1))
        newest = self.apply_charge("20.00", date(2024, 3, 1))
        pending = self.apply_charge("10.00", date(2023, 12, 1), approve=False)

        response = self.client.post(
            "/api/v1/servicecharges/payments/",
            {
                "member": self.member.member_no,
                "amount": "70.00",
                "payment_date": "2024-03-15",
                "deposit_mode": "Cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["settled_charges"]), 1)
        self.assertEqual(response.data["unapplied_amount"], Decimal("40.00"))

        for charge in (oldest, middle, newest, pending):
            charge.refresh_from_db()
        self.assertEqual(oldest.status, AppliedServiceCharge.PAID)
        self.assertIsNotNone(oldest.paid_at)
        # Stops at the first charge it cannot cover
        self.assertEqual(middle.status, AppliedServiceCharge.APPROVED)
        self.assertEqual(newest.status, AppliedServiceCharge.APPROVED)
        self.assertEqual(pending.status, AppliedServiceCharge.PENDING)

    def test_payment_without_outstanding_charges(self):
        response = self.client.post(
            "/api/v1/servicecharges/payments/",
            {
                "member": self.member.member_no,
                "amount": "70.00",
                "payment_date": "2024-03-15",
                "deposit_mode": "Cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_paid_charges_are_locked(self):
        charge = self.apply_charge("30.00", date(2024, 1, 1))
        AppliedServiceCharge.objects.filter(pk=charge.pk).update(
            status=AppliedServiceCharge.PAID
        )
        response = self.client.patch(
            f"/api/v1/servicecharges/{charge.reference}/",
            {"amount_charged": "10.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_summary_reports_outstanding(self):
        self.apply_charge("30.00", date(2024, 1, 1))
        paid = self.apply_charge("20.00", date(2024, 2, 1))
        AppliedServiceCharge.objects.filter(pk=paid.pk).update(
            status=AppliedServiceCharge.PAID
        )

        response = self.client.get("/api/v1/servicecharges/summaries/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data[0]
        self.assertEqual(summary["total_applied"], Decimal("50.00"))
        self.assertEqual(summary["total_paid"], Decimal("20.00"))
        self.assertEqual(summary["total_outstanding"], Decimal("30.00"))
        self.assertEqual(summary["fulfillment_percentage"], Decimal("40.00"))
