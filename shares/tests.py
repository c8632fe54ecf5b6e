from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from schools.models import School
from shares.models import Share
from shares.utils import allocate_shares
from sharetypes.models import ShareType

User = get_user_model()


class AllocateSharesTests(SimpleTestCase):
    def test_whole_shares_only(self):
        self.assertEqual(
            allocate_shares(Decimal("350.00"), Decimal("100.00")), (3, Decimal("300.00"))
        )

    def test_contribution_too_small(self):
        with self.assertRaises(ValueError):
            allocate_shares(Decimal("99.99"), Decimal("100.00"))

    def test_share_type_without_value(self):
        with self.assertRaises(ValueError):
            allocate_shares(Decimal("100.00"), Decimal("0"))


class ShareAllocationTests(APITestCase):
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
            full_name="Abebe Kebede", sex="Male", school=school, join_date=date(2023, 1, 1)
        )
        ShareType.objects.create(name="Ordinary", value_per_share=Decimal("100.00"))
        self.url = "/api/v1/shares/"
        self.client.force_authenticate(user=self.admin)

    def allocate(self, amount):
        return self.client.post(
            self.url,
            {
                "member": self.member.member_no,
                "share_type": "Ordinary",
                "contribution_amount": amount,
                "allocation_date": "2024-01-10",
                "deposit_mode": "Cash",
            },
            format="json",
        )

    def test_allocation_is_computed_and_pending(self):
        response = self.allocate("350.00")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["count"], 3)
        self.assertEqual(response.data["total_value_allocated"], "300.00")
        self.assertEqual(response.data["status"], Share.PENDING)
        self.member.refresh_from_db()
        self.assertEqual(self.member.shares_count, 0)

    def test_insufficient_contribution(self):
        response = self.allocate("50.00")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("contribution_amount", response.data)

    def test_approval_adds_shares_and_locks_record(self):
        response = self.allocate("350.00")
        share = Share.objects.get(reference=response.data["reference"])
        share.approve(self.admin)

        self.member.refresh_from_db()
        self.assertEqual(self.member.shares_count, 3)

        response = self.client.delete(f"{self.url}{share.reference}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
