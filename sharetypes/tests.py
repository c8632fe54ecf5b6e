from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

User = get_user_model()


class ShareTypeTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="password",
            first_name="Admin",
            last_name="User",
            is_system_admin=True,
        )
        self.url = "/api/v1/sharetypes/"

    def test_value_per_share_must_be_positive(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.url, {"name": "Ordinary", "value_per_share": "0.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            self.url, {"name": "Ordinary", "value_per_share": "100.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
