import time

import jwt
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from rest_framework import status

from users.models import User

SECRET = "test-supabase-secret-with-enough-length"


def make_token(sub="5b6c", exp_offset=3600, secret=SECRET, **extra):
    payload = {
        "sub": sub,
        "aud": "authenticated",
        "exp": int(time.time()) + exp_offset,
        "email": "sora@example.com",
        "user_metadata": {"full_name": "Sora", "avatar_url": "https://example.com/sora.png"},
    }
    payload.update(extra)
    return jwt.encode(payload, secret, algorithm="HS256")


@override_settings(SUPABASE_JWT_SECRET=SECRET)
class SupabaseJWTAuthenticationTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_valid_token_provisions_user(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token()}")
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["provider_uid"], "supabase:5b6c")
        self.assertEqual(resp.json()["display_name"], "Sora")

        resp = self.client.get("/api/auth/me/")
        self.assertEqual(User.objects.filter(provider_uid="supabase:5b6c").count(), 1)

    def test_expired_token(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(exp_offset=-60)}")
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_foreign_signature_is_not_accepted(self):
        token = make_token(secret="some-other-secret-that-is-long-enough")
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        resp = self.client.get("/api/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(User.objects.exists())
