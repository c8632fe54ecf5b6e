from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from members.models import Member
from schools.models import School

User = get_user_model()


class SchoolTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.url = "/api/v1/schools/"

    def test_admin_can_create_school(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url, {"name": "Hillside Primary", "contact_person": "W/ro Hana"}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(School.objects.filter(name="Hillside Primary").exists())

    def test_school_with_members_cannot_be_deleted(self):
        school = School.objects.create(name="Hillside Primary")
        Member.objects.create(
            full_name="Abebe Kebede", sex="Male", school=school, join_date=date(2023, 1, 1)
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f"{self.url}{school.reference}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_requests_are_refused(self):
        response = self.client.get(self.url)
        self.assertIn(
            response.status_code,
            [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN],
        )
