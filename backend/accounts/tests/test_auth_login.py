"""
Integration tests — login by username or email.

Endpoint under test:  POST /api/accounts/auth/login/
Request payload:      {"identifier": "<username|email>", "password": "..."}
Success response:     HTTP 200 with ``access``, ``refresh`` and ``user``.
Failure response:     HTTP 400 from ``CustomTokenObtainPairSerializer``.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()

_PASSWORD = "Str0ng!Pass99"


class TestAuthLogin(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(
            username="login_test_user",
            email="login_test_user@example.com",
            password=_PASSWORD,
            first_name="Login",
            last_name="Tester",
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    def test_login_with_username(self):
        response = self._post_login("login_test_user", _PASSWORD)

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["username"], "login_test_user")

    def test_login_with_email_is_case_insensitive(self):
        response = self._post_login("Login_Test_User@Example.com", _PASSWORD)

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["user"]["id"], self.user.pk)

    def test_wrong_password_is_rejected(self):
        response = self._post_login("login_test_user", "nope-nope-nope")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", response.data)

    def test_inactive_account_cannot_log_in(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        response = self._post_login("login_test_user", _PASSWORD)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_access_token_authenticates_me_endpoint(self):
        token = self._post_login("login_test_user", _PASSWORD).data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = self.client.get(reverse("accounts:me"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "login_test_user")
