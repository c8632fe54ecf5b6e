from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from savings.calculators import (
    average_daily_balance,
    calculate_monthly_interest,
    interest_period,
    month_bounds,
    month_label,
    reconstruct_balance,
)
from savings.models import MemberSavingAccount
from savingstypes.models import SavingAccountType
from schools.models import School

User = get_user_model()


def txn(day, amount, transaction_type="deposit"):
    return SimpleNamespace(
        date=day, amount=Decimal(amount), transaction_type=transaction_type
    )


class BalanceReconstructionTests(SimpleTestCase):
    def setUp(self):
        self.transactions = [
            txn(date(2024, 1, 1), "100.00"),
            txn(date(2024, 1, 5), "30.00", "withdrawal"),
        ]

    def test_balance_counts_only_earlier_transactions(self):
        self.assertEqual(
            reconstruct_balance(0, self.transactions, date(2024, 1, 1)), Decimal("0")
        )
        self.assertEqual(
            reconstruct_balance(0, self.transactions, date(2024, 1, 2)),
            Decimal("100.00"),
        )
        self.assertEqual(
            reconstruct_balance(0, self.transactions, date(2024, 1, 5)),
            Decimal("100.00"),
        )
        self.assertEqual(
            reconstruct_balance(0, self.transactions, date(2024, 1, 6)),
            Decimal("70.00"),
        )

    def test_initial_balance_is_the_starting_point(self):
        self.assertEqual(
            reconstruct_balance(Decimal("500.00"), [], date(2024, 1, 1)),
            Decimal("500.00"),
        )

    def test_unknown_transaction_type_raises(self):
        with self.assertRaises(ValueError):
            reconstruct_balance(0, [txn(date(2024, 1, 1), "5", "refund")], date(2024, 2, 1))


class MonthlyInterestTests(SimpleTestCase):
    def test_flat_balance_over_thirty_day_month(self):
        interest = calculate_monthly_interest(
            Decimal("1000.00"), [], 2024, 4, Decimal("12")
        )
        self.assertEqual(interest, Decimal("10.00"))

    def test_average_daily_balance_weights_each_day(self):
        transactions = [
            txn(date(2024, 1, 1), "100.00"),
            txn(date(2024, 1, 5), "30.00", "withdrawal"),
        ]
        average = average_daily_balance(0, transactions, 2024, 1)
        # 4 days at 100 and 27 days at 70
        self.assertEqual(average, Decimal("2290") / 31)
        self.assertEqual(
            calculate_monthly_interest(0, transactions, 2024, 1, 12), Decimal("0.74")
        )

    def test_transactions_after_the_month_are_ignored(self):
        transactions = [txn(date(2024, 5, 1), "1000.00")]
        self.assertEqual(
            calculate_monthly_interest(Decimal("1000.00"), transactions, 2024, 4, 12),
            Decimal("10.00"),
        )

    def test_zero_rate_gives_zero_interest(self):
        self.assertEqual(
            calculate_monthly_interest(Decimal("1000.00"), [], 2024, 4, 0),
            Decimal("0.00"),
        )

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            month_bounds(2024, 13)
        with self.assertRaises(ValueError):
            calculate_monthly_interest(Decimal("1000.00"), [], 2024, 4, -1)

    def test_month_helpers(self):
        self.assertEqual(month_bounds(2024, 2), (date(2024, 2, 1), date(2024, 2, 29), 29))
        self.assertEqual(month_label(2024, 1), "January 2024")
        self.assertEqual(interest_period(2024, 1), "2024-01")


class MemberSavingAccountTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.school = School.objects.create(name="Hillside Primary")
        self.member = Member.objects.create(
            full_name="Abebe Kebede",
            sex="Male",
            school=self.school,
            join_date=date(2023, 1, 1),
        )
        self.account_type = SavingAccountType.objects.create(
            name="Regular Savings", interest_rate=Decimal("12.00")
        )
        self.url = "/api/v1/savings/"

    def test_opening_balance_becomes_current_balance(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "member": self.member.member_no,
                "account_type": self.account_type.name,
                "initial_balance": "250.00",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        account = MemberSavingAccount.objects.get(member=self.member)
        self.assertEqual(account.balance, Decimal("250.00"))
        self.assertTrue(account.account_number.startswith("SV"))

    def test_one_account_per_type(self):
        MemberSavingAccount.objects.create(
            member=self.member, account_type=self.account_type
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {"member": self.member.member_no, "account_type": self.account_type.name},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_account_cannot_move_to_another_member(self):
        other = Member.objects.create(
            full_name="Tigist Alemu",
            sex="Female",
            school=self.school,
            join_date=date(2023, 1, 1),
        )
        account = MemberSavingAccount.objects.create(
            member=self.member,
            account_type=self.account_type,
            initial_balance=Decimal("500.00"),
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            f"{self.url}{account.reference}/",
            {"member": other.member_no},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        account.refresh_from_db()
        self.member.refresh_from_db()
        self.assertEqual(account.member, self.member)
        self.assertEqual(self.member.savings_balance, Decimal("500.00"))

        response = self.client.patch(
            f"{self.url}{account.reference}/",
            {"member": self.member.member_no, "expected_monthly_saving": "200.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_member_user_cannot_open_accounts(self):
        user = User.objects.create_user(
            email="abebe@example.com",
            password="password",
            first_name="Abebe",
            last_name="Kebede",
            member=self.member,
        )
        self.client.force_authenticate(user=user)
        response = self.client.post(
            self.url,
            {"member": self.member.member_no, "account_type": self.account_type.name},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
