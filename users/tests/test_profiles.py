from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from users.models import PrivacySettings, User
from tries.models import ParticipantStatus, Try, TryParticipant
from users.privacy import can_access_content, filter_user_data, get_privacy_settings
from users.services import provision_user


class ProfileApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = User.objects.create_user(
            username="alice", password="pass", email="alice@example.com", display_name="Alice",
        )
        self.bob = User.objects.create_user(username="bob", password="pass", email="bob@example.com")

    def test_me_get_and_patch(self):
        self.client.force_authenticate(user=self.alice)
        resp = self.client.get("/api/users/me/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["display_name"], "Alice")

        resp = self.client.patch("/api/users/me/", {"display_name": "  Alicia ", "bio": "山が好き"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.display_name, "Alicia")
        self.assertEqual(self.alice.bio, "山が好き")

    def test_blank_display_name_rejected(self):
        self.client.force_authenticate(user=self.alice)
        resp = self.client.patch("/api/users/me/", {"display_name": "   "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_no_public_user_listing(self):
        self.client.force_authenticate(user=self.alice)
        resp = self.client.get("/api/users/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.json())

    def test_email_hidden_from_others_by_default(self):
        self.client.force_authenticate(user=self.bob)
        resp = self.client.get(f"/api/users/{self.alice.id}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertNotIn("email", resp.json())
        self.assertEqual(resp.json()["display_name"], "Alice")

        self.client.force_authenticate(user=self.alice)
        resp = self.client.get(f"/api/users/{self.alice.id}/")
        self.assertEqual(resp.json()["email"], "alice@example.com")

    def test_private_profile_is_minimal(self):
        self.client.force_authenticate(user=self.alice)
        resp = self.client.patch(
            "/api/users/me/privacy/", {"profile_visibility": "private"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["profile_visibility"], "private")

        self.client.force_authenticate(user=self.bob)
        resp = self.client.get(f"/api/users/{self.alice.id}/")
        self.assertEqual(set(resp.json().keys()), {"id", "display_name"})

    def test_privacy_defaults_created_on_read(self):
        self.client.force_authenticate(user=self.bob)
        self.assertFalse(PrivacySettings.objects.filter(user=self.bob).exists())
        resp = self.client.get("/api/users/me/privacy/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["email_visibility"], "private")
        self.assertTrue(resp.json()["allow_direct_messages"])
        self.assertTrue(PrivacySettings.objects.filter(user=self.bob).exists())

    def test_invalid_visibility_rejected(self):
        self.client.force_authenticate(user=self.alice)
        resp = self.client.patch("/api/users/me/privacy/", {"tries_visibility": "friends"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)



class ProfileActivityApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(username="owner", password="pass", display_name="Kaito")
        self.viewer = User.objects.create_user(username="viewer", password="pass", display_name="Kaede")
        self.organized = Try.objects.create(organizer=self.owner, title="写真散歩", dates=["2030-03-01"])
        other_try = Try.objects.create(organizer=self.viewer, title="料理会", dates=["2030-03-02"], capacity=2)
        TryParticipant.objects.create(try_ref=other_try, user=self.owner, status=ParticipantStatus.APPROVED)
        self.client.force_authenticate(user=self.viewer)

    def set_privacy(self, **fields):
        settings_obj = get_privacy_settings(self.owner)
        for key, value in fields.items():
            setattr(settings_obj, key, value)
        settings_obj.save()

    def test_tries_follow_visibility(self):
        resp = self.client.get(f"/api/users/{self.owner.id}/tries/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([t["id"] for t in resp.json()], [self.organized.id])

        self.set_privacy(tries_visibility=PrivacySettings.VISIBILITY_PRIVATE)
        resp = self.client.get(f"/api/users/{self.owner.id}/tries/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner)
        resp = self.client.get(f"/api/users/{self.owner.id}/tries/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_participations_follow_visibility(self):
        resp = self.client.get(f"/api/users/{self.owner.id}/participations/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p["try_title"] for p in resp.json()], ["料理会"])

        self.set_privacy(participations_visibility=PrivacySettings.VISIBILITY_PRIVATE)
        resp = self.client.get(f"/api/users/{self.owner.id}/participations/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_skips_unsearchable_users(self):
        resp = self.client.get("/api/users/search/", {"q": "kai"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([u["id"] for u in resp.json()], [self.owner.id])

        self.set_privacy(searchable=False)
        resp = self.client.get("/api/users/search/", {"q": "kai"})
        self.assertEqual(resp.json(), [])

    def test_search_requires_query(self):
        resp = self.client.get("/api/users/search/")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class PrivacyRulesTestCase(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username="owner", password="pass", email="o@example.com")
        self.viewer = User.objects.create_user(username="viewer", password="pass")

    def test_levels(self):
        settings_obj = get_privacy_settings(self.owner)
        settings_obj.tries_visibility = PrivacySettings.VISIBILITY_PUBLIC
        settings_obj.evaluations_visibility = PrivacySettings.VISIBILITY_REGISTERED
        settings_obj.participations_visibility = PrivacySettings.VISIBILITY_PRIVATE
        settings_obj.save()

        self.assertTrue(can_access_content(self.owner, None, "tries"))
        self.assertFalse(can_access_content(self.owner, None, "evaluations"))
        self.assertTrue(can_access_content(self.owner, self.viewer, "evaluations"))
        self.assertFalse(can_access_content(self.owner, self.viewer, "participations"))
        self.assertTrue(can_access_content(self.owner, self.owner, "participations"))

    def test_unknown_kind_is_denied(self):
        self.assertFalse(can_access_content(self.owner, self.owner, "photos"))

    def test_owner_sees_unfiltered_data(self):
        data = {"id": self.owner.id, "display_name": "", "email": "o@example.com"}
        self.assertEqual(filter_user_data(data, self.owner, self.owner), data)
        self.assertNotIn("email", filter_user_data(data, self.owner, self.viewer))


class ProvisionUserTestCase(TestCase):
    def test_first_sign_in_creates_profile(self):
        user = provision_user("google:123", email="taro@example.com", display_name="Taro")
        self.assertEqual(user.username, "taro")
        self.assertEqual(user.display_name, "Taro")
        self.assertFalse(user.has_usable_password())

    def test_existing_profile_is_returned_unchanged(self):
        first = provision_user("google:123", email="taro@example.com", display_name="Taro")
        first.display_name = "たろう"
        first.save()

        again = provision_user("google:123", email="taro@example.com", display_name="Taro")
        self.assertEqual(again.id, first.id)
        self.assertEqual(again.display_name, "たろう")
        self.assertEqual(User.objects.count(), 1)

    def test_username_collisions_get_suffix(self):
        User.objects.create_user(username="taro", password="pass")
        user = provision_user("supabase:abc", email="taro@example.com")
        self.assertEqual(user.username, "taro_1")
