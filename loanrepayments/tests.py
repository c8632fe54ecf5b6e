from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase
from rest_framework import serializers, status
from rest_framework.test import APITestCase

from loanrepayments.calculators import (
    allocate_repayment,
    minimum_instalment,
    next_due_date,
    payoff_amount,
)
from loanrepayments.models import LoanRepayment
from loanrepayments.utils import record_repayment
from loans.models import Loan
from loantypes.models import LoanType
from members.models import Member
from schools.models import School

User = get_user_model()


class RepaymentAllocationTests(SimpleTestCase):
    def test_interest_is_paid_first(self):
        allocation = allocate_repayment(Decimal("1000.00"), Decimal("12"), Decimal("50.00"))
        self.assertEqual(allocation.interest_due, Decimal("10.00"))
        self.assertEqual(allocation.interest_paid, Decimal("10.00"))
        self.assertEqual(allocation.principal_paid, Decimal("40.00"))
        self.assertEqual(allocation.new_balance, Decimal("960.00"))
        self.assertFalse(allocation.is_paid_off)

    def test_payment_below_interest_pays_no_principal(self):
        allocation = allocate_repayment(Decimal("1000.00"), Decimal("12"), Decimal("6.00"))
        self.assertEqual(allocation.interest_paid, Decimal("6.00"))
        self.assertEqual(allocation.principal_paid, Decimal("0.00"))
        self.assertEqual(allocation.new_balance, Decimal("1000.00"))

    def test_parts_always_sum_to_payment(self):
        for amount in ["0.01", "3.33", "10.00", "517.25", "1010.00"]:
            allocation = allocate_repayment(Decimal("1000.00"), Decimal("12"), Decimal(amount))
            self.assertEqual(
                allocation.interest_paid + allocation.principal_paid, Decimal(amount)
            )

    def test_full_payoff(self):
        allocation = allocate_repayment(Decimal("1000.00"), Decimal("12"), Decimal("1010.00"))
        self.assertEqual(allocation.new_balance, Decimal("0.00"))
        self.assertTrue(allocation.is_paid_off)

    def test_non_positive_payment_raises(self):
        with self.assertRaises(ValueError):
            allocate_repayment(Decimal("1000.00"), Decimal("12"), Decimal("0"))

    def test_minimum_instalment_and_payoff(self):
        self.assertEqual(payoff_amount(Decimal("1000.00"), 12), Decimal("1010.00"))
        self.assertEqual(
            minimum_instalment(Decimal("1200.00"), 12, Decimal("1000.00"), 12),
            Decimal("110.00"),
        )
        self.assertEqual(
            minimum_instalment(Decimal("1200.00"), 12, Decimal("50.00"), 12),
            Decimal("50.50"),
        )

    def test_next_due_date_steps_by_frequency(self):
        self.assertEqual(next_due_date(date(2024, 1, 31)), date(2024, 2, 29))
        self.assertEqual(next_due_date(date(2024, 1, 15), "quarterly"), date(2024, 4, 15))
        self.assertEqual(next_due_date(date(2024, 1, 15), "yearly"), date(2025, 1, 15))


class LoanRepaymentTests(APITestCase):
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
        self.loan_type = LoanType.objects.create(
            name="Regular Loan",
            interest_rate=Decimal("12.00"),
            max_loan_amount=Decimal("100000.00"),
            max_repayment_period=24,
        )
        self.loan = self.create_loan()
        self.url = "/api/v1/loanrepayments/"

    def create_loan(self, principal="1000.00"):
        loan = Loan.objects.create(
            member=self.member,
            loan_type=self.loan_type,
            principal_amount=Decimal(principal),
            remaining_balance=Decimal(principal),
            interest_rate=self.loan_type.interest_rate,
            loan_term=20,
            disbursement_date=date(2024, 1, 1),
        )
        return loan.approve(self.admin)

    def test_repayment_splits_interest_and_principal(self):
        repayment = record_repayment(self.loan, Decimal("60.00"), date(2024, 2, 1))

        self.loan.refresh_from_db()
        self.assertEqual(repayment.interest_paid, Decimal("10.00"))
        self.assertEqual(repayment.principal_paid, Decimal("50.00"))
        self.assertEqual(repayment.balance_after, Decimal("950.00"))
        self.assertEqual(self.loan.remaining_balance, Decimal("950.00"))
        self.assertEqual(self.loan.next_due_date, date(2024, 3, 1))
        self.assertEqual(self.loan.status, Loan.ACTIVE)

    def test_payment_below_minimum_is_rejected(self):
        with self.assertRaises(serializers.ValidationError):
            record_repayment(self.loan, Decimal("20.00"), date(2024, 2, 1))
        self.assertFalse(LoanRepayment.objects.exists())

    def test_payment_above_payoff_is_rejected(self):
        with self.assertRaises(serializers.ValidationError):
            record_repayment(self.loan, Decimal("1010.01"), date(2024, 2, 1))

    def test_paying_in_full_closes_the_loan(self):
        record_repayment(self.loan, Decimal("1010.00"), date(2024, 2, 1))
        self.loan.refresh_from_db()
        self.assertEqual(self.loan.status, Loan.PAID_OFF)
        self.assertEqual(self.loan.remaining_balance, Decimal("0.00"))
        self.assertIsNone(self.loan.next_due_date)

        with self.assertRaises(serializers.ValidationError):
            record_repayment(self.loan, Decimal("10.00"), date(2024, 3, 1))

    def test_pending_loans_cannot_be_repaid(self):
        pending = Loan.objects.create(
            member=self.member,
            loan_type=self.loan_type,
            principal_amount=Decimal("500.00"),
            remaining_balance=Decimal("500.00"),
            interest_rate=Decimal("12.00"),
            loan_term=10,
            disbursement_date=date(2024, 1, 1),
        )
        with self.assertRaises(serializers.ValidationError):
            record_repayment(pending, Decimal("55.00"), date(2024, 2, 1))

    def test_repayment_through_the_api(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "loan": self.loan.account_number,
                "amount_paid": "60.00",
                "payment_date": "2024-02-01",
                "deposit_mode": "Cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["interest_paid"], "10.00")
        self.assertEqual(response.data["principal_paid"], "50.00")

    def test_batch_sees_earlier_items_and_skips_zero(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            f"{self.url}batch/",
            {
                "repayments": [
                    {"loan": self.loan.account_number, "amount_paid": "60.00", "payment_date": "2024-02-01"},
                    {"loan": self.loan.account_number, "amount_paid": "0", "payment_date": "2024-02-01"},
                    {"loan": self.loan.account_number, "amount_paid": "59.50", "payment_date": "2024-03-01"},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.loan.refresh_from_db()
        # Second payment: 9.50 interest on 950, 50 principal
        self.assertEqual(self.loan.remaining_balance, Decimal("900.00"))
        self.assertEqual(LoanRepayment.objects.count(), 2)

    def test_batch_failure_rolls_back_everything(self):
        other = Loan.objects.create(
            member=self.member,
            loan_type=self.loan_type,
            principal_amount=Decimal("500.00"),
            remaining_balance=Decimal("500.00"),
            interest_rate=Decimal("12.00"),
            loan_term=10,
            disbursement_date=date(2024, 1, 1),
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            f"{self.url}batch/",
            {
                "repayments": [
                    {"loan": self.loan.account_number, "amount_paid": "60.00", "payment_date": "2024-02-01"},
                    {"loan": other.account_number, "amount_paid": "55.00", "payment_date": "2024-02-01"},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.loan.refresh_from_db()
        self.assertEqual(self.loan.remaining_balance, Decimal("1000.00"))
        self.assertFalse(LoanRepayment.objects.exists())
