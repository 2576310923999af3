from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from users.models import User


class GoogleLoginTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = "/api/auth/google/"

    @patch("authx.views.id_token.verify_oauth2_token")
    def test_first_login_provisions_user(self, verify):
        verify.return_value = {
            "sub": "10001",
            "email": "hana@example.com",
            "name": "Hana",
            "picture": "https://example.com/hana.png",
        }

        resp = self.client.post(self.url, {"id_token": "token"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertIn("access", data)
        self.assertIn("refresh", data)
        self.assertEqual(data["user"]["display_name"], "Hana")

        user = User.objects.get(provider_uid="google:10001")
        self.assertEqual(user.email, "hana@example.com")

        resp = self.client.post(self.url, {"id_token": "token"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(User.objects.filter(provider_uid="google:10001").count(), 1)

    def test_missing_token(self):
        resp = self.client.post(self.url, {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    @patch("authx.views.id_token.verify_oauth2_token")
    def test_invalid_token(self, verify):
        verify.side_effect = ValueError("Wrong issuer")
        resp = self.client.post(self.url, {"id_token": "bad"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.exists())

    @patch("authx.views.id_token.verify_oauth2_token")
    def test_disabled_account(self, verify):
        User.objects.create_user(username="gone", password="pass", provider_uid="google:20002", is_active=False)
        verify.return_value = {"sub": "20002", "email": "gone@example.com"}
        resp = self.client.post(self.url, {"id_token": "token"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_me_requires_auth(self):
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

        user = User.objects.create_user(username="me", password="pass", provider_uid="google:1")
        self.client.force_authenticate(user=user)
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.json()["provider_uid"], "google:1")
