from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from loans.models import Loan
from loantypes.models import LoanType
from members.models import Address, Member, MemberShareCommitment
from members.utils import calculate_final_payout
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving
from savingstypes.models import SavingAccountType
from schools.models import School
from shares.models import Share
from sharetypes.models import ShareType

User = get_user_model()


class MemberTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.school = School.objects.create(name="Hillside Primary")
        self.share_type = ShareType.objects.create(
            name="Ordinary", value_per_share=Decimal("100.00")
        )
        self.url = "/api/v1/members/"

    def test_create_member_with_nested_details(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "full_name": "Abebe Kebede",
                "sex": "Male",
                "school": self.school.reference,
                "join_date": "2024-01-01",
                "address": {"city": "Addis Ababa", "sub_city": "Bole"},
                "emergency_contact": {"name": "Almaz", "phone": "0911000000"},
                "share_commitments": [
                    {"share_type": "Ordinary", "monthly_committed_amount": "200.00"}
                ],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["member_no"].startswith("MBR"))
        self.assertEqual(response.data["status"], Member.ACTIVE)

        member = Member.objects.get(member_no=response.data["member_no"])
        self.assertEqual(member.address.city, "Addis Ababa")
        self.assertEqual(member.share_commitments.count(), 1)

    def test_explicit_null_removes_nested_details(self):
        member = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=self.school, join_date=date(2024, 1, 1)
        )
        MemberShareCommitment.objects.create(
            member=member, share_type=self.share_type, monthly_committed_amount=100
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            f"{self.url}{member.member_no}/",
            {"address": {"city": "Adama"}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        member.refresh_from_db()
        self.assertEqual(member.address.city, "Adama")
        self.assertEqual(member.share_commitments.count(), 1)

        response = self.client.patch(
            f"{self.url}{member.member_no}/", {"address": None}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Address.objects.filter(member=member).exists())
        self.assertIsNone(response.data["address"])

    def test_member_users_only_see_themselves(self):
        own = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=self.school, join_date=date(2024, 1, 1)
        )
        other = Member.objects.create(
            full_name="Almaz Tesfaye", sex="Female", school=self.school, join_date=date(2024, 1, 1)
        )
        user = User.objects.create_user(
            email="abebe@example.com",
            password="password",
            first_name="Abebe",
            last_name="Kebede",
            member=own,
        )
        self.client.force_authenticate(user=user)

        response = self.client.get(self.url)
        self.assertEqual([m["member_no"] for m in response.data], [own.member_no])

        response = self.client.get(f"{self.url}{other.member_no}/profile/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(f"{self.url}{own.member_no}/profile/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_members_with_open_loans_cannot_be_deleted(self):
        member = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=self.school, join_date=date(2024, 1, 1)
        )
        Loan.objects.create(
            member=member,
            loan_type=LoanType.objects.create(name="Regular Loan"),
            principal_amount=Decimal("1000.00"),
            remaining_balance=Decimal("1000.00"),
            interest_rate=Decimal("12.00"),
            loan_term=12,
            disbursement_date=date(2024, 1, 1),
            status=Loan.ACTIVE,
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f"{self.url}{member.member_no}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Member.objects.filter(pk=member.pk).exists())


class AccountClosureTests(APITestCase):
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
        self.account = MemberSavingAccount.objects.create(
            member=self.member,
            account_type=SavingAccountType.objects.create(
                name="Regular Savings", interest_rate=Decimal("12.00")
            ),
            initial_balance=Decimal("1000.00"),
        )
        self.url = f"/api/v1/members/{self.member.member_no}/closure/"
        self.client.force_authenticate(user=self.admin)

    def test_payout_preview(self):
        payout = calculate_final_payout(self.member)
        self.assertEqual(payout["current_balance"], Decimal("1000.00"))
        self.assertEqual(payout["accrued_interest"], Decimal("5.00"))
        self.assertEqual(payout["total_payout"], Decimal("1005.00"))

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_payout"], Decimal("1005.00"))

    def test_closure_pays_out_and_deactivates(self):
        response = self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.member.refresh_from_db()
        self.account.refresh_from_db()
        self.assertEqual(self.member.status, Member.INACTIVE)
        self.assertIsNotNone(self.member.closure_date)
        self.assertEqual(self.member.savings_balance, Decimal("0.00"))
        self.assertEqual(self.account.balance, Decimal("0.00"))
        self.assertFalse(self.account.is_active)

        postings = Saving.objects.filter(savings_account=self.account)
        self.assertEqual(postings.count(), 2)
        self.assertTrue(all(p.status == Saving.APPROVED for p in postings))

        response = self.client.get("/api/v1/members/closed/")
        self.assertEqual(response.data[0]["member_no"], self.member.member_no)

    def test_closed_members_cannot_be_closed_again(self):
        self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        response = self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_closure_refunds_shares_and_cancels_commitments(self):
        share_type = ShareType.objects.create(
            name="Ordinary", value_per_share=Decimal("100.00")
        )
        MemberShareCommitment.objects.create(
            member=self.member,
            share_type=share_type,
            monthly_committed_amount=Decimal("100.00"),
        )
        Share.objects.create(
            member=self.member,
            share_type=share_type,
            count=3,
            allocation_date=date(2024, 1, 6),
            value_per_share=Decimal("100.00"),
            contribution_amount=Decimal("300.00"),
            total_value_allocated=Decimal("300.00"),
        ).approve(self.admin)

        response = self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_payout"], Decimal("1305.00"))

        self.member.refresh_from_db()
        self.assertEqual(self.member.shares_count, 0)
        refund = Share.objects.get(transaction_type=Share.REFUND)
        self.assertEqual(refund.status, Share.APPROVED)
        self.assertEqual(refund.count, 3)
        self.assertEqual(refund.total_value_allocated, Decimal("300.00"))
        self.assertEqual(
            calculate_final_payout(self.member)["total_shares_paid"], Decimal("0.00")
        )
        self.assertFalse(
            self.member.share_commitments.filter(
                status=MemberShareCommitment.ACTIVE
            ).exists()
        )

    def test_pending_transactions_block_closure(self):
        pending = Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("400.00"),
            date=date(2024, 1, 5),
            transaction_type=Saving.WITHDRAWAL,
        )
        response = self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.member.refresh_from_db()
        self.assertEqual(self.member.status, Member.ACTIVE)
        self.assertEqual(Saving.objects.count(), 1)

        pending.reject("Entered twice", self.admin)
        response = self.client.post(self.url, {"deposit_mode": "Bank"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
