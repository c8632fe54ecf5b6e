from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from dividends.models import Dividend
from members.models import Member
from schools.models import School

User = get_user_model()


class DividendTests(APITestCase):
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
            shares_count=7,
        )
        self.url = "/api/v1/dividends/"
        self.client.force_authenticate(user=self.admin)

    def test_share_count_defaults_to_current_holding(self):
        response = self.client.post(
            self.url,
            {
                "member": self.member.member_no,
                "amount": "70.00",
                "distribution_date": "2024-12-31",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["share_count_at_distribution"], 7)
        self.assertEqual(response.data["status"], Dividend.PENDING)

    def test_approval_leaves_member_aggregates_alone(self):
        dividend = Dividend.objects.create(
            member=self.member, amount=Decimal("70.00"), distribution_date=date(2024, 12, 31)
        )
        dividend.approve(self.admin)
        self.member.refresh_from_db()
        self.assertEqual(self.member.savings_balance, Decimal("0.00"))
        self.assertEqual(self.member.shares_count, 7)
