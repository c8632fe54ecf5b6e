from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from loans.models import Loan
from loantypes.models import LoanType
from members.models import Member
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving
from savingstypes.models import SavingAccountType
from schools.models import School
from servicecharges.models import (
    AppliedServiceCharge,
    ServiceChargeType,
    LOAN_INTEREST_CHARGE_NAME,
)

User = get_user_model()


class SavingsInterestTests(APITestCase):
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
        self.account = MemberSavingAccount.objects.create(
            member=self.member,
            account_type=self.account_type,
            initial_balance=Decimal("1000.00"),
        )
        self.client.force_authenticate(user=self.admin)
        self.params = {"year": 2024, "month": 4, "scope": "all"}

    def test_dry_run_writes_nothing(self):
        response = self.client.post(
            "/api/v1/interest/savings/calculate/", self.params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        result = response.data["results"][0]
        self.assertEqual(result["calculated_interest"], "10.00")
        self.assertEqual(result["average_daily_balance"], "1000.00")
        self.assertFalse(result["already_posted"])
        self.assertFalse(Saving.objects.exists())

    def test_pending_transactions_do_not_count(self):
        Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("3000.00"),
            date=date(2024, 4, 1),
        )
        response = self.client.post(
            "/api/v1/interest/savings/calculate/", self.params, format="json"
        )
        self.assertEqual(response.data["results"][0]["calculated_interest"], "10.00")

    def test_posting_creates_pending_deposit_once(self):
        response = self.client.post(
            "/api/v1/interest/savings/post/", self.params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["created_count"], 1)

        saving = Saving.objects.get()
        self.assertEqual(saving.status, Saving.PENDING)
        self.assertEqual(saving.amount, Decimal("10.00"))
        self.assertEqual(saving.date, date(2024, 4, 30))
        self.assertEqual(saving.interest_period, "2024-04")
        self.assertEqual(saving.notes, "Interest posting for April 2024")
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("1000.00"))

        response = self.client.post(
            "/api/v1/interest/savings/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 0)
        self.assertEqual(response.data["skipped"], [self.account.account_number])
        self.assertEqual(Saving.objects.count(), 1)

    def test_rejected_posting_can_be_reposted(self):
        self.client.post("/api/v1/interest/savings/post/", self.params, format="json")
        Saving.objects.get().reject("Wrong month", self.admin)

        response = self.client.post(
            "/api/v1/interest/savings/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 1)

    def test_prior_posting_with_the_same_notes_suppresses_the_month(self):
        Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("10.00"),
            date=date(2024, 4, 30),
            notes="Interest posting for April 2024",
        )
        response = self.client.post(
            "/api/v1/interest/savings/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 0)
        self.assertEqual(response.data["skipped"], [self.account.account_number])
        self.assertEqual(Saving.objects.count(), 1)

    def test_rejected_posting_with_the_same_notes_does_not_suppress(self):
        prior = Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("10.00"),
            date=date(2024, 4, 30),
            notes="Interest posting for April 2024",
        )
        prior.reject("Posted by hand", self.admin)

        response = self.client.post(
            "/api/v1/interest/savings/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 1)
        self.assertEqual(Saving.objects.filter(interest_period="2024-04").count(), 1)

    def test_superseded_posting_cannot_be_edited(self):
        self.client.post("/api/v1/interest/savings/post/", self.params, format="json")
        first = Saving.objects.get()
        first.reject("Wrong month", self.admin)
        self.client.post("/api/v1/interest/savings/post/", self.params, format="json")

        response = self.client.patch(
            f"/api/v1/savingstransactions/{first.reference}/",
            {"amount": "12.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        first.refresh_from_db()
        self.assertEqual(first.status, Saving.REJECTED)
        self.assertEqual(first.amount, Decimal("10.00"))

    def test_scope_filters(self):
        params = dict(self.params, scope="school", scope_value="missing")
        response = self.client.post(
            "/api/v1/interest/savings/calculate/", params, format="json"
        )
        self.assertEqual(response.data["results"], [])

        params = dict(self.params, scope="member")
        response = self.client.post(
            "/api/v1/interest/savings/calculate/", params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_month(self):
        params = dict(self.params, month=13)
        response = self.client.post(
            "/api/v1/interest/savings/calculate/", params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LoanInterestTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        school = School.objects.create(name="Hillside Primary")
        member = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=school, join_date=date(2023, 1, 1)
        )
        loan_type = LoanType.objects.create(
            name="Regular Loan",
            interest_rate=Decimal("12.00"),
            npl_interest_rate=Decimal("24.00"),
        )
        self.loan = Loan.objects.create(
            member=member,
            loan_type=loan_type,
            principal_amount=Decimal("5000.00"),
            remaining_balance=Decimal("5000.00"),
            interest_rate=Decimal("12.00"),
            loan_term=12,
            disbursement_date=date(2024, 1, 1),
            status=Loan.ACTIVE,
        )
        self.client.force_authenticate(user=self.admin)
        self.params = {"year": 2024, "month": 4, "scope": "all"}

    def test_posting_requires_the_interest_charge_type(self):
        response = self.client.post(
            "/api/v1/interest/loans/post/", self.params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_posting_creates_one_charge_per_loan_and_month(self):
        ServiceChargeType.objects.create(name=LOAN_INTEREST_CHARGE_NAME)
        response = self.client.post(
            "/api/v1/interest/loans/post/", self.params, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        charge = AppliedServiceCharge.objects.get()
        self.assertEqual(charge.amount_charged, Decimal("50.00"))
        self.assertEqual(charge.status, AppliedServiceCharge.PENDING)
        self.assertEqual(charge.loan, self.loan)

        response = self.client.post(
            "/api/v1/interest/loans/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 0)
        self.assertEqual(AppliedServiceCharge.objects.count(), 1)

    def test_overdue_loans_use_the_npl_rate(self):
        Loan.objects.filter(pk=self.loan.pk).update(status=Loan.OVERDUE)
        response = self.client.post(
            "/api/v1/interest/loans/calculate/", self.params, format="json"
        )
        self.assertEqual(response.data["results"][0]["calculated_interest"], "100.00")

    def test_prior_charge_with_the_same_notes_suppresses_the_month(self):
        charge_type = ServiceChargeType.objects.create(name=LOAN_INTEREST_CHARGE_NAME)
        AppliedServiceCharge.objects.create(
            member=self.loan.member,
            service_charge_type=charge_type,
            amount_charged=Decimal("50.00"),
            date_applied=date(2024, 4, 30),
            notes=f"Monthly loan interest for April 2024 on Loan {self.loan.account_number}",
        )
        response = self.client.post(
            "/api/v1/interest/loans/post/", self.params, format="json"
        )
        self.assertEqual(response.data["created_count"], 0)
        self.assertEqual(AppliedServiceCharge.objects.count(), 1)

    def test_superseded_charge_cannot_be_edited(self):
        ServiceChargeType.objects.create(name=LOAN_INTEREST_CHARGE_NAME)
        self.client.post("/api/v1/interest/loans/post/", self.params, format="json")
        first = AppliedServiceCharge.objects.get()
        first.reject("Wrong month", self.admin)
        self.client.post("/api/v1/interest/loans/post/", self.params, format="json")

        response = self.client.patch(
            f"/api/v1/servicecharges/{first.reference}/",
            {"amount_charged": "40.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        first.refresh_from_db()
        self.assertEqual(first.status, AppliedServiceCharge.REJECTED)
