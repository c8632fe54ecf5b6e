from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from dividends.models import Dividend
from members.models import Member
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving
from savingstypes.models import SavingAccountType
from schools.models import School
from shares.models import Share
from sharetypes.models import ShareType

User = get_user_model()


class ApprovalQueueTests(APITestCase):
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
        self.account = MemberSavingAccount.objects.create(
            member=self.member,
            account_type=SavingAccountType.objects.create(name="Regular Savings"),
        )
        self.deposit = Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("200.00"),
            date=date(2024, 1, 5),
        )
        share_type = ShareType.objects.create(
            name="Ordinary", value_per_share=Decimal("100.00")
        )
        self.share = Share.objects.create(
            member=self.member,
            share_type=share_type,
            count=3,
            allocation_date=date(2024, 1, 6),
            value_per_share=Decimal("100.00"),
            contribution_amount=Decimal("350.00"),
            total_value_allocated=Decimal("300.00"),
        )
        self.dividend = Dividend.objects.create(
            member=self.member,
            amount=Decimal("45.00"),
            distribution_date=date(2024, 1, 7),
        )
        self.client.force_authenticate(user=self.admin)

    def test_pending_queue_lists_every_kind_oldest_first(self):
        response = self.client.get("/api/v1/approvals/pending/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [entry["kind"] for entry in response.data], ["saving", "share", "dividend"]
        )

        response = self.client.get("/api/v1/approvals/pending/?kind=share")
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["amount"], "300.00")

    def test_approving_a_share_allocation_adds_shares(self):
        response = self.client.post(
            "/api/v1/approvals/approve/",
            {"kind": "share", "reference": self.share.reference},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.member.refresh_from_db()
        self.assertEqual(self.member.shares_count, 3)

    def test_reject_needs_a_reason(self):
        response = self.client.post(
            "/api/v1/approvals/reject/",
            {"kind": "dividend", "reference": self.dividend.reference},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            "/api/v1/approvals/reject/",
            {
                "kind": "dividend",
                "reference": self.dividend.reference,
                "reason": "Duplicate entry",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dividend.refresh_from_db()
        self.assertEqual(self.dividend.status, Dividend.REJECTED)

    def test_unknown_reference_is_not_found(self):
        response = self.client.post(
            "/api/v1/approvals/approve/",
            {"kind": "saving", "reference": "missing"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_approve_is_all_or_nothing(self):
        withdrawal = Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal("500.00"),
            date=date(2024, 1, 8),
            transaction_type=Saving.WITHDRAWAL,
        )
        response = self.client.post(
            "/api/v1/approvals/bulk-approve/",
            {
                "items": [
                    {"kind": "saving", "reference": self.deposit.reference},
                    {"kind": "saving", "reference": withdrawal.reference},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.deposit.refresh_from_db()
        self.account.refresh_from_db()
        self.assertEqual(self.deposit.status, Saving.PENDING)
        self.assertEqual(self.account.balance, Decimal("0.00"))

    def test_bulk_approve(self):
        response = self.client.post(
            "/api/v1/approvals/bulk-approve/",
            {
                "items": [
                    {"kind": "saving", "reference": self.deposit.reference},
                    {"kind": "dividend", "reference": self.dividend.reference},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("200.00"))

    def test_member_users_cannot_approve(self):
        user = User.objects.create_user(
            email="abebe@example.com",
            password="password",
            first_name="Abebe",
            last_name="Kebede",
            member=self.member,
        )
        self.client.force_authenticate(user=user)
        response = self.client.post(
            "/api/v1/approvals/approve/",
            {"kind": "saving", "reference": self.deposit.reference},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_bulk_reject_is_all_or_nothing(self):
        self.share.approve(self.admin)
        response = self.client.post(
            "/api/v1/approvals/bulk-reject/",
            {
                "items": [
                    {"kind": "saving", "reference": self.deposit.reference},
                    {"kind": "share", "reference": self.share.reference},
                ],
                "reason": "Entered twice",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.deposit.refresh_from_db()
        self.share.refresh_from_db()
        self.assertEqual(self.deposit.status, Saving.PENDING)
        self.assertIsNone(self.deposit.rejection_reason)
        self.assertEqual(self.share.status, Share.APPROVED)

    def test_bulk_reject(self):
        response = self.client.post(
            "/api/v1/approvals/bulk-reject/",
            {
                "items": [
                    {"kind": "saving", "reference": self.deposit.reference},
                    {"kind": "dividend", "reference": self.dividend.reference},
                ],
                "reason": "Entered twice",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.deposit.refresh_from_db()
        self.dividend.refresh_from_db()
        self.assertEqual(self.deposit.status, Saving.REJECTED)
        self.assertEqual(self.dividend.status, Dividend.REJECTED)
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("0.00"))
