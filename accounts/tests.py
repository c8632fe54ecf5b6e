from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from schools.models import School

User = get_user_model()


class AuthenticationTests(APITestCase):
    def setUp(self):
        school = School.objects.create(name="Hillside Primary")
        self.member = Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=school, join_date=date(2023, 1, 1)
        )
        self.user = User.objects.create_user(
            email="abebe@example.com",
            password="password",
            first_name="Abebe",
            last_name="Kebede",
            member=self.member,
        )

    def test_token_login(self):
        response = self.client.post(
            "/api/v1/auth/token/",
            {"email": "abebe@example.com", "password": "password"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["member"], self.member.member_no)
        self.assertTrue(response.data["token"])

    def test_bad_credentials(self):
        response = self.client.post(
            "/api/v1/auth/token/",
            {"email": "abebe@example.com", "password": "wrong"},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_system_admins_manage_users(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/v1/auth/users/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.client.force_authenticate(user=admin)
        response = self.client.post(
            "/api/v1/auth/users/",
            {
                "email": "clerk@example.com",
                "password": "secret123",
                "first_name": "Clerk",
                "last_name": "One",
            },
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(User.objects.get(email="clerk@example.com").check_password("secret123"))
