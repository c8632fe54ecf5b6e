from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member, MemberShareCommitment
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving
from savingstypes.models import SavingAccountType
from schools.models import School
from sharetypes.models import ShareType

User = get_user_model()


class ReportTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.school = School.objects.create(name="Hillside Primary")
        self.account_type = SavingAccountType.objects.create(name="Regular Savings")
        self.member = Member.objects.create(
            full_name="Tigist Alemu",
            sex="Female",
            school=self.school,
            join_date=date(2023, 1, 1),
            saving_account_type=self.account_type,
            expected_monthly_saving=Decimal("300.00"),
        )
        self.account = MemberSavingAccount.objects.create(
            member=self.member,
            account_type=self.account_type,
            initial_balance=Decimal("100.00"),
        )
        for day, amount, kind in [
            (date(2024, 1, 10), "50.00", Saving.DEPOSIT),
            (date(2024, 2, 5), "200.00", Saving.DEPOSIT),
            (date(2024, 2, 20), "80.00", Saving.WITHDRAWAL),
        ]:
            Saving.objects.create(
                member=self.member,
                savings_account=self.account,
                amount=Decimal(amount),
                date=day,
                transaction_type=kind,
            ).approve(self.admin)
        # Pending entries stay off the statement
        Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("999.00"),
            date=date(2024, 2, 10),
        )
        self.client.force_authenticate(user=self.admin)

    def test_account_statement(self):
        response = self.client.get(
            "/api/v1/transactions/statement/",
            {"account": self.account.account_number, "start": "2024-02-01", "end": "2024-02-29"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["balance_brought_forward"], "150.00")
        self.assertEqual(
            [row["balance"] for row in response.data["transactions"]],
            ["350.00", "270.00"],
        )
        self.assertEqual(response.data["transactions"][1]["debit"], "80.00")
        self.assertEqual(response.data["closing_balance"], "270.00")

    def test_statement_rejects_reversed_dates(self):
        response = self.client.get(
            "/api/v1/transactions/statement/",
            {"account": self.account.account_number, "start": "2024-03-01", "end": "2024-02-01"},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_members_only_see_their_own_statements(self):
        other = Member.objects.create(
            full_name="Dawit Bekele", sex="Male", school=self.school, join_date=date(2023, 1, 1)
        )
        user = User.objects.create_user(
            email="dawit@example.com",
            password="password",
            first_name="Dawit",
            last_name="Bekele",
            member=other,
        )
        self.client.force_authenticate(user=user)
        response = self.client.get(
            "/api/v1/transactions/statement/",
            {"account": self.account.account_number, "start": "2024-02-01", "end": "2024-02-29"},
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_collection_forecast(self):
        share_type = ShareType.objects.create(name="Ordinary", value_per_share=Decimal("100.00"))
        MemberShareCommitment.objects.create(
            member=self.member, share_type=share_type, monthly_committed_amount=Decimal("200.00")
        )
        Member.objects.create(
            full_name="Abebe Kebede",
            sex="Male",
            school=self.school,
            join_date=date(2023, 1, 1),
            saving_account_type=self.account_type,
            expected_monthly_saving=Decimal("150.00"),
        )

        response = self.client.get(
            "/api/v1/transactions/collection-forecast/",
            {"school": self.school.reference, "collection_type": "savings", "type": "Regular Savings"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [row["full_name"] for row in response.data["members"]],
            ["Abebe Kebede", "Tigist Alemu"],
        )
        self.assertEqual(response.data["total_expected"], Decimal("450.00"))

        response = self.client.get(
            "/api/v1/transactions/collection-forecast/",
            {"school": self.school.reference, "collection_type": "shares", "type": "Ordinary"},
        )
        self.assertEqual(len(response.data["members"]), 1)
        self.assertEqual(response.data["members"][0]["expected_contribution"], "200.00")

    def test_dashboard(self):
        response = self.client.get("/api/v1/transactions/dashboard/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["active_members"], 1)
        self.assertEqual(response.data["total_savings"], Decimal("270.00"))
        self.assertEqual(response.data["schools"], 1)
        self.assertEqual(response.data["pending_approvals"], 1)
        self.assertEqual(len(response.data["savings_trend"]), 6)
        self.assertEqual(response.data["school_performance"][0]["members"], 1)
