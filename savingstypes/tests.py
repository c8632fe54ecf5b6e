from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from savingstypes.models import SavingAccountType
from schools.models import School

User = get_user_model()


class SavingAccountTypeTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.url = "/api/v1/savingstypes/"
        self.client.force_authenticate(user=self.admin)

    def test_create_and_list(self):
        response = self.client.post(
            self.url,
            {"name": "Holiday Savings", "interest_rate": "6.00", "contribution_type": "fixed"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get(self.url)
        self.assertEqual(response.data[0]["name"], "Holiday Savings")

    def test_type_in_use_cannot_be_deleted(self):
        account_type = SavingAccountType.objects.create(name="Regular Savings")
        Member.objects.create(
            full_name="Abebe Kebede",
            sex="Male",
            school=School.objects.create(name="Hillside Primary"),
            join_date=date(2023, 1, 1),
            saving_account_type=account_type,
        )
        response = self.client.delete(f"{self.url}{account_type.reference}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
