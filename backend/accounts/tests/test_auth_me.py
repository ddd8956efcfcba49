"""
Integration tests — ``GET`` / ``PATCH /api/accounts/me/``.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()


class TestMeEndpoint(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="me_user",
            email="me_user@example.com",
            password="Str0ng!Pass99",
            points=35,
            badge_level="Silver",
        )
        User.objects.create_user(
            username="taken",
            email="taken@example.com",
            password="Str0ng!Pass99",
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.me_url = reverse("accounts:me")

    def test_profile_includes_points_and_badge(self):
        response = self.client.get(self.me_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["points"], 35)
        self.assertEqual(response.data["badge_level"], "Silver")
        self.assertIsNone(response.data["department_name"])

    def test_patch_updates_names(self):
        response = self.client.patch(
            self.me_url, {"first_name": "Ada", "last_name": "Lovelace"}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.get_full_name(), "Ada Lovelace")

    def test_patch_cannot_change_points(self):
        self.client.patch(self.me_url, {"points": 1000}, format="json")

        self.user.refresh_from_db()
        self.assertEqual(self.user.points, 35)

    def test_patch_to_taken_email_conflicts(self):
        response = self.client.patch(self.me_url, {"email": "TAKEN@example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "conflict")

    def test_anonymous_request_is_unauthorized(self):
        response = APIClient().get(self.me_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
