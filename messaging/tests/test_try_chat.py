from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from users.models import User
from notifications.models import Notification
from tries.models import ParticipantStatus, Try, TryParticipant
from messaging.models import TryChatMessage


class TryChatApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = User.objects.create_user(
            username="organizer", password="pass", display_name="主催者", email="org@example.com",
        )
        self.member = User.objects.create_user(
            username="member", password="pass", display_name="Member", email="member@example.com",
        )
        self.member2 = User.objects.create_user(username="member2", password="pass", display_name="Member2")
        self.pending = User.objects.create_user(username="pending", password="pass")

        self.try_obj = Try.objects.create(organizer=self.organizer, title="読書会", dates=["2030-01-01"], capacity=5)
        TryParticipant.objects.create(try_ref=self.try_obj, user=self.member, status=ParticipantStatus.APPROVED)
        TryParticipant.objects.create(try_ref=self.try_obj, user=self.member2, status=ParticipantStatus.APPROVED)
        TryParticipant.objects.create(try_ref=self.try_obj, user=self.pending, status=ParticipantStatus.PENDING)

        self.url = f"/api/tries/{self.try_obj.id}/chat/"

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def test_only_members_can_use_chat(self):
        self.auth(self.pending)
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        resp = self.client.post(self.url, {"content": "入れて"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(TryChatMessage.objects.exists())

    def test_post_notifies_everyone_but_sender(self):
        self.auth(self.member)
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.post(self.url, {"content": "よろしくお願いします"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertFalse(resp.json()["is_organizer"])

        notes = Notification.objects.filter(type=Notification.TYPE_CHAT_MESSAGE)
        self.assertEqual({n.user_id for n in notes}, {self.organizer.id, self.member2.id})

        note = notes.get(user=self.organizer)
        self.assertEqual(note.title, "新規メッセージ")
        self.assertEqual(note.message, "Memberさんから「読書会」のチャットでメッセージが届いています")
        self.assertEqual(note.link, f"/tries/{self.try_obj.id}/chat")

    def test_listing_in_order(self):
        self.auth(self.organizer)
        self.client.post(self.url, {"content": "1"}, format="json")
        self.auth(self.member)
        self.client.post(self.url, {"content": "2"}, format="json")

        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()
        self.assertEqual([m["content"] for m in data["results"]], ["1", "2"])
        self.assertTrue(data["results"][0]["is_organizer"])

    def test_contacts_revealed_only_when_both_shared(self):
        share_url = f"/api/tries/{self.try_obj.id}/chat/contact-share/"

        self.auth(self.organizer)
        resp = self.client.post(share_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["contacts"], {})

        self.auth(self.member)
        resp = self.client.get(self.url)
        self.assertEqual(resp.json()["contacts"], {})

        resp = self.client.post(share_url)
        self.assertEqual(resp.json()["contacts"], {str(self.organizer.id): "org@example.com"})

        self.auth(self.organizer)
        resp = self.client.get(self.url)
        self.assertEqual(resp.json()["contacts"], {str(self.member.id): "member@example.com"})

    def test_outsider_cannot_share_contact(self):
        self.auth(self.pending)
        resp = self.client.post(f"/api/tries/{self.try_obj.id}/chat/contact-share/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
