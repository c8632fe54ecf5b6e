from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework import status
from rest_framework.test import APITestCase

from loans.models import Loan, LoanGuarantor
from loantypes.models import LoanType
from members.models import Member
from schools.models import School

User = get_user_model()


class LoanTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.school = School.objects.create(name="Hillside Primary")
        self.member = self.create_member("Abebe Kebede")
        self.loan_type = LoanType.objects.create(
            name="Regular Loan",
            interest_rate=Decimal("12.00"),
            min_loan_amount=Decimal("1000.00"),
            max_loan_amount=Decimal("50000.00"),
            max_repayment_period=24,
            charges_fees=True,
        )
        self.url = "/api/v1/loans/"
        self.client.force_authenticate(user=self.admin)

    def create_member(self, name):
        return Member.objects.create(
            full_name=name, sex="Other", school=self.school, join_date=date(2023, 1, 1)
        )

    def payload(self, **overrides):
        data = {
            "member": self.member.member_no,
            "loan_type": self.loan_type.name,
            "principal_amount": "12000.00",
            "loan_term": 12,
            "disbursement_date": "2024-01-15",
        }
        data.update(overrides)
        return data

    def open_loan(self, member, guarantor=None):
        loan = Loan.objects.create(
            member=member,
            loan_type=self.loan_type,
            principal_amount=Decimal("5000.00"),
            remaining_balance=Decimal("5000.00"),
            interest_rate=Decimal("12.00"),
            loan_term=12,
            disbursement_date=date(2024, 1, 1),
            status=Loan.ACTIVE,
        )
        if guarantor is not None:
            LoanGuarantor.objects.create(loan=loan, guarantor=guarantor)
        return loan

    def test_create_loan_sets_terms_and_fees(self):
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        loan = Loan.objects.get(reference=response.data["reference"])
        self.assertEqual(loan.status, Loan.PENDING)
        self.assertEqual(loan.remaining_balance, Decimal("12000.00"))
        self.assertEqual(loan.interest_rate, Decimal("12.00"))
        self.assertEqual(loan.insurance_fee, Decimal("120.00"))
        self.assertEqual(loan.service_fee, Decimal("15.00"))
        # 1000 principal plus 120 first-month interest
        self.assertEqual(loan.monthly_repayment_amount, Decimal("1120.00"))

    def test_amount_and_term_limits(self):
        response = self.client.post(
            self.url, self.payload(principal_amount="60000.00"), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("principal_amount", response.data)

        response = self.client.post(self.url, self.payload(loan_term=36), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("loan_term", response.data)

    def test_concurrent_loans_of_the_same_type_are_blocked(self):
        self.open_loan(self.member)
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("loan_type", response.data)

    def test_guarantor_rules(self):
        response = self.client.post(
            self.url, self.payload(guarantors=[self.member.member_no]), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        guarantor = self.create_member("Almaz Tesfaye")
        self.open_loan(self.create_member("Borrower One"), guarantor)
        self.open_loan(self.create_member("Borrower Two"), guarantor)
        response = self.client.post(
            self.url, self.payload(guarantors=[guarantor.member_no]), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("guarantors", response.data)

    def test_guarantors_and_collaterals_are_saved(self):
        guarantor = self.create_member("Almaz Tesfaye")
        response = self.client.post(
            self.url,
            self.payload(
                guarantors=[guarantor.member_no],
                collaterals=[{"type": "TITLE_DEED", "description": "Plot 12"}],
            ),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            response.data["guarantor_members"][0]["member_no"], guarantor.member_no
        )
        self.assertEqual(len(response.data["collaterals"]), 1)

    def test_approve_and_reject(self):
        response = self.client.post(self.url, self.payload(), format="json")
        reference = response.data["reference"]

        response = self.client.post(f"{self.url}{reference}/reject/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(f"{self.url}{reference}/approve/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], Loan.ACTIVE)
        self.assertEqual(response.data["next_due_date"], "2024-02-15")

        response = self.client.post(f"{self.url}{reference}/approve/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_overdue_list_and_command(self):
        loan = self.open_loan(self.member)
        loan.next_due_date = date.today() - timedelta(days=10)
        loan.save()

        response = self.client.get(f"{self.url}overdue/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["days_overdue"], 10)

        call_command("update_overdue_loans")
        loan.refresh_from_db()
        self.assertEqual(loan.status, Loan.OVERDUE)
