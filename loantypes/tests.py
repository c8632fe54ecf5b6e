from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from loans.models import Loan
from loantypes.models import LoanType
from members.models import Member
from schools.models import School

User = get_user_model()


class LoanTypeTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.url = "/api/v1/loantypes/"
        self.client.force_authenticate(user=self.admin)

    def test_limits_must_be_ordered(self):
        response = self.client.post(
            self.url,
            {
                "name": "Emergency Loan",
                "interest_rate": "10.00",
                "min_loan_amount": "5000.00",
                "max_loan_amount": "1000.00",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("max_loan_amount", response.data)

        response = self.client.post(
            self.url,
            {"name": "Emergency Loan", "interest_rate": "10.00", "min_loan_amount": "5000.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_loan_type_in_use_cannot_be_deleted(self):
        loan_type = LoanType.objects.create(name="Regular Loan", interest_rate=Decimal("12.00"))
        school = School.objects.create(name="Hillside Primary")
        member = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=school, join_date=date(2023, 1, 1)
        )
        Loan.objects.create(
            member=member,
            loan_type=loan_type,
            principal_amount=Decimal("1000.00"),
            remaining_balance=Decimal("1000.00"),
            interest_rate=Decimal("12.00"),
            loan_term=12,
            disbursement_date=date(2024, 1, 1),
        )
        response = self.client.delete(f"{self.url}{loan_type.reference}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
