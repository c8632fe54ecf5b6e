from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers, status
from rest_framework.test import APITestCase

from members.models import Member
from savings.models import MemberSavingAccount
from savingstransactions.models import Saving
from savingstypes.models import SavingAccountType
from schools.models import School

User = get_user_model()


class SavingTransactionTests(APITestCase):
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
            initial_balance=Decimal("100.00"),
        )
        self.url = "/api/v1/savingstransactions/"

    def create_saving(self, amount, transaction_type=Saving.DEPOSIT, **kwargs):
        return Saving.objects.create(
            member=self.member,
            savings_account=self.account,
            amount=Decimal(amount),
            date=date(2024, 1, 10),
            transaction_type=transaction_type,
            **kwargs,
        )

    def test_new_transactions_are_pending_and_do_not_move_balance(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "member": self.member.member_no,
                "savings_account": self.account.account_number,
                "amount": "50.00",
                "date": "2024-01-10",
                "transaction_type": "deposit",
                "deposit_mode": "Cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], Saving.PENDING)
        self.assertEqual(response.data["month"], "January 2024")
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("100.00"))

    def test_approving_a_deposit_credits_account_and_member(self):
        saving = self.create_saving("50.00")
        saving.approve(self.admin)

        self.account.refresh_from_db()
        self.member.refresh_from_db()
        self.assertEqual(saving.status, Saving.APPROVED)
        self.assertEqual(saving.reviewed_by, self.admin)
        self.assertEqual(self.account.balance, Decimal("150.00"))
        self.assertEqual(self.member.savings_balance, Decimal("150.00"))

    def test_approving_a_withdrawal_debits_account(self):
        saving = self.create_saving("40.00", Saving.WITHDRAWAL)
        saving.approve(self.admin)
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("60.00"))

    def test_withdrawal_above_balance_is_rejected_on_entry(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "member": self.member.member_no,
                "savings_account": self.account.account_number,
                "amount": "150.00",
                "date": "2024-01-10",
                "transaction_type": "withdrawal",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)

    def test_withdrawal_above_balance_fails_at_approval(self):
        first = self.create_saving("80.00", Saving.WITHDRAWAL)
        second = self.create_saving("80.00", Saving.WITHDRAWAL)
        first.approve(self.admin)

        with self.assertRaises(serializers.ValidationError):
            second.approve(self.admin)

        second.refresh_from_db()
        self.account.refresh_from_db()
        self.assertEqual(second.status, Saving.PENDING)
        self.assertEqual(self.account.balance, Decimal("20.00"))

    def test_only_pending_records_can_be_approved(self):
        saving = self.create_saving("50.00")
        saving.approve(self.admin)
        with self.assertRaises(serializers.ValidationError):
            saving.approve(self.admin)
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("150.00"))

    def test_reject_requires_reason_and_has_no_effect(self):
        saving = self.create_saving("50.00")
        with self.assertRaises(serializers.ValidationError):
            saving.reject("  ", self.admin)

        saving.reject("Receipt missing", self.admin)
        self.assertEqual(saving.status, Saving.REJECTED)
        self.assertEqual(saving.rejection_reason, "Receipt missing")
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("100.00"))

    def test_editing_a_rejected_record_resets_it_to_pending(self):
        saving = self.create_saving("50.00")
        saving.reject("Wrong amount", self.admin)

        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            f"{self.url}{saving.reference}/", {"amount": "55.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        saving.refresh_from_db()
        self.assertEqual(saving.status, Saving.PENDING)
        self.assertIsNone(saving.rejection_reason)
        self.assertEqual(saving.amount, Decimal("55.00"))

    def test_approved_records_cannot_be_edited_or_deleted(self):
        saving = self.create_saving("50.00")
        saving.approve(self.admin)
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(
            f"{self.url}{saving.reference}/", {"amount": "55.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(f"{self.url}{saving.reference}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Saving.objects.filter(pk=saving.pk).exists())

    def test_account_must_belong_to_member(self):
        other = Member.objects.create(
            full_name="Almaz Tesfaye",
            sex="Female",
            school=self.school,
            join_date=date(2023, 1, 1),
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {
                "member": other.member_no,
                "savings_account": self.account.account_number,
                "amount": "10.00",
                "date": "2024-01-10",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("savings_account", response.data)


class GroupCollectionTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        school = School.objects.create(name="Hillside Primary")
        account_type = SavingAccountType.objects.create(name="Regular Savings")
        self.accounts = []
        for name in ["Abebe Kebede", "Almaz Tesfaye"]:
            member = Member.objects.create(
                full_name=name, sex="Other", school=school, join_date=date(2023, 1, 1)
            )
            self.accounts.append(
                MemberSavingAccount.objects.create(
                    member=member, account_type=account_type
                )
            )
        self.url = "/api/v1/savingstransactions/group-collections/"

    def row(self, account, amount):
        return {
            "member": account.member.member_no,
            "savings_account": account.account_number,
            "amount": amount,
            "date": "2024-02-01",
            "deposit_mode": "Cash",
        }

    def test_zero_amounts_are_skipped(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {"savings": [self.row(self.accounts[0], "25.00"), self.row(self.accounts[1], "0")]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["created_count"], 1)
        self.assertEqual(response.data["skipped_count"], 1)
        self.assertEqual(Saving.objects.filter(status=Saving.PENDING).count(), 1)

    def test_one_invalid_row_aborts_the_batch(self):
        bad = self.row(self.accounts[1], "10.00")
        bad["savings_account"] = self.accounts[0].account_number
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url,
            {"savings": [self.row(self.accounts[0], "25.00"), bad]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["index"], "2")
        self.assertFalse(Saving.objects.exists())
