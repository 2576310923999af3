from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from users.models import User
from notifications.models import Notification, NotificationOutbox
from tries.exceptions import TransitionError
from tries.models import ParticipantStatus, Try, TryComment, TryDraft, TryParticipant
from tries.services import update_try


class TryCrudApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = User.objects.create_user(username="organizer", password="pass", display_name="主催者")
        self.member = User.objects.create_user(username="member", password="pass", display_name="Member")
        self.other = User.objects.create_user(username="other", password="pass")

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def make_try(self, **kwargs):
        defaults = {
            "organizer": self.organizer,
            "title": "山登り",
            "dates": ["2030-05-01"],
            "capacity": 3,
        }
        defaults.update(kwargs)
        return Try.objects.create(**defaults)

    def test_create_try(self):
        TryDraft.objects.create(user=self.organizer, title="下書き")

        self.auth(self.organizer)
        resp = self.client.post(
            "/api/tries/",
            {
                "title": "  週末キャンプ ",
                "category": "event",
                "description": "<b>一緒に</b>行きましょう",
                "dates": ["2030-06-02", "2030-06-01"],
                "location": "長野",
                "capacity": 4,
                "tags": [" アウトドア", "キャンプ", "アウトドア"],
            },
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.json()
        self.assertEqual(data["title"], "週末キャンプ")
        self.assertEqual(data["status"], Try.STATUS_OPEN)
        self.assertEqual(data["dates"], ["2030-06-01", "2030-06-02"])
        self.assertEqual(data["tags"], ["アウトドア", "キャンプ"])
        self.assertEqual(data["description"], "一緒に行きましょう")
        self.assertEqual(data["organizer"]["id"], self.organizer.id)
        self.assertEqual(data["participant_count"], 0)

        # Publishing drops the draft
        self.assertFalse(TryDraft.objects.filter(user=self.organizer).exists())

    def test_create_rejects_zero_capacity(self):
        self.auth(self.organizer)
        resp = self.client.post(
            "/api/tries/",
            {"title": "x", "dates": ["2030-01-01"], "capacity": 0},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Try.objects.exists())

    def test_create_rejects_too_many_tags_and_missing_dates(self):
        self.auth(self.organizer)
        resp = self.client.post(
            "/api/tries/",
            {"title": "x", "dates": ["2030-01-01"], "capacity": 1, "tags": ["a", "b", "c", "d", "e", "f"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post("/api/tries/", {"title": "x", "capacity": 1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post("/api/tries/", {"title": "x", "capacity": 1, "dates": []}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        run = self.make_try(title="朝ラン", category=Try.CATEGORY_SPORTS, tags=["ランニング"], dates=["2030-05-10"])
        code = self.make_try(title="ハッカソン", category=Try.CATEGORY_PROJECT, tags=["開発"], dates=["2030-07-01"])
        theirs = self.make_try(organizer=self.other, title="読書会", dates=["2030-05-20"])

        self.auth(self.organizer)

        resp = self.client.get("/api/tries/", {"keyword": "ラン"})
        self.assertEqual([t["id"] for t in resp.json()["results"]], [run.id])

        resp = self.client.get("/api/tries/", {"tag": "開発"})
        self.assertEqual([t["id"] for t in resp.json()["results"]], [code.id])

        resp = self.client.get("/api/tries/", {"start_date": "2030-05-01", "end_date": "2030-05-31"})
        self.assertEqual({t["id"] for t in resp.json()["results"]}, {run.id, theirs.id})

        resp = self.client.get("/api/tries/", {"category": "project"})
        self.assertEqual([t["id"] for t in resp.json()["results"]], [code.id])

        resp = self.client.get("/api/tries/", {"mine": "1"})
        self.assertEqual(resp.json()["count"], 2)

    def test_list_is_newest_first_and_paginated(self):
        first = self.make_try(title="one")
        second = self.make_try(title="two")

        self.auth(self.member)
        resp = self.client.get("/api/tries/", {"limit": 1})
        data = resp.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual(len(data["results"]), 1)
        self.assertEqual(data["results"][0]["id"], second.id)

        resp = self.client.get("/api/tries/", {"limit": 1, "offset": 1})
        self.assertEqual(resp.json()["results"][0]["id"], first.id)

    def test_only_organizer_can_edit_or_delete(self):
        try_obj = self.make_try()

        self.auth(self.other)
        resp = self.client.patch(f"/api/tries/{try_obj.id}/", {"title": "hijack"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        resp = self.client.delete(f"/api/tries/{try_obj.id}/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.organizer)
        resp = self.client.delete(f"/api/tries/{try_obj.id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Try.objects.filter(pk=try_obj.id).exists())

    @patch("tries.services.delete_image")
    def test_delete_removes_stored_images(self, delete_image):
        try_obj = self.make_try(image_urls=["https://cdn.example.com/a.png", "https://cdn.example.com/b.png"])

        self.auth(self.organizer)
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.delete(f"/api/tries/{try_obj.id}/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(
            [c.args[0] for c in delete_image.call_args_list],
            ["https://cdn.example.com/a.png", "https://cdn.example.com/b.png"],
        )

    def test_edit_sees_completion_made_after_load(self):
        try_obj = self.make_try()
        Try.objects.filter(pk=try_obj.pk).update(status=Try.STATUS_COMPLETED)

        with self.assertRaises(TransitionError):
            update_try(try_obj, self.organizer, {"title": "遅れた編集"})

        self.assertEqual(Try.objects.get(pk=try_obj.pk).title, "山登り")
        self.assertFalse(NotificationOutbox.objects.exists())

    def test_capacity_cannot_drop_below_approved(self):
        try_obj = self.make_try(capacity=3)
        TryParticipant.objects.create(try_ref=try_obj, user=self.member, status=ParticipantStatus.APPROVED)
        TryParticipant.objects.create(try_ref=try_obj, user=self.other, status=ParticipantStatus.APPROVED)

        self.auth(self.organizer)
        resp = self.client.patch(f"/api/tries/{try_obj.id}/", {"capacity": 1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        try_obj.refresh_from_db()
        self.assertEqual(try_obj.capacity, 3)

        resp = self.client.patch(f"/api/tries/{try_obj.id}/", {"capacity": 2}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_date_change_notifies_approved_participants(self):
        try_obj = self.make_try()
        TryParticipant.objects.create(try_ref=try_obj, user=self.member, status=ParticipantStatus.APPROVED)
        TryParticipant.objects.create(try_ref=try_obj, user=self.other, status=ParticipantStatus.PENDING)

        self.auth(self.organizer)
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.patch(f"/api/tries/{try_obj.id}/", {"dates": ["2030-05-08"]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        notes = Notification.objects.filter(type=Notification.TYPE_DATE_CHANGED)
        self.assertEqual(notes.count(), 1)
        note = notes[0]
        self.assertEqual(note.user, self.member)
        self.assertEqual(note.title, "TRYの日程が変更されました")
        self.assertEqual(note.message, "山登りの日程が2030-05-01から2030-05-08に変更されました")
        self.assertEqual(note.metadata, {"old_date": "2030-05-01", "new_date": "2030-05-08"})

        outbox = NotificationOutbox.objects.get()
        self.assertEqual(outbox.status, NotificationOutbox.STATUS_COMPLETED)

    def test_other_edit_sends_try_updated(self):
        try_obj = self.make_try()
        TryParticipant.objects.create(try_ref=try_obj, user=self.member, status=ParticipantStatus.APPROVED)

        self.auth(self.organizer)
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.patch(f"/api/tries/{try_obj.id}/", {"location": "高尾山"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        note = Notification.objects.get(user=self.member)
        self.assertEqual(note.type, Notification.TYPE_TRY_UPDATED)
        self.assertEqual(note.message, "参加中の「山登り」が更新されました")

    def test_close_and_reopen(self):
        try_obj = self.make_try()
        self.auth(self.organizer)

        resp = self.client.post(f"/api/tries/{try_obj.id}/close/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["status"], Try.STATUS_CLOSED)

        resp = self.client.post(f"/api/tries/{try_obj.id}/close/")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp = self.client.post(f"/api/tries/{try_obj.id}/reopen/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        try_obj.refresh_from_db()
        self.assertEqual(try_obj.status, Try.STATUS_OPEN)

    def test_comments_newest_first(self):
        try_obj = self.make_try()
        self.auth(self.member)
        self.client.post(f"/api/tries/{try_obj.id}/comments/", {"content": "first"}, format="json")
        self.client.post(f"/api/tries/{try_obj.id}/comments/", {"content": "second"}, format="json")

        resp = self.client.get(f"/api/tries/{try_obj.id}/comments/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([c["content"] for c in resp.json()["results"]], ["second", "first"])
        self.assertEqual(TryComment.objects.count(), 2)

    def test_empty_comment_rejected(self):
        try_obj = self.make_try()
        self.auth(self.member)
        resp = self.client.post(f"/api/tries/{try_obj.id}/comments/", {"content": "   "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class TryDraftApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="drafter", password="pass")
        self.client.force_authenticate(user=self.user)

    def test_draft_roundtrip(self):
        resp = self.client.get("/api/tries/draft/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

        payload = {
            "title": "書きかけ",
            "description": "メモ",
            "seeking_companion": True,
            "tags": ["旅行"],
            "images": [{"preview": "data:image/png;base64,AAAA", "name": "a.png", "type": "image/png"}],
        }
        resp = self.client.put("/api/tries/draft/", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(resp.json()["last_modified"])

        resp = self.client.get("/api/tries/draft/")
        self.assertEqual(resp.json()["title"], "書きかけ")
        self.assertEqual(resp.json()["images"][0]["name"], "a.png")

        # Saving again replaces the single draft
        self.client.put("/api/tries/draft/", {"title": "更新"}, format="json")
        self.assertEqual(TryDraft.objects.filter(user=self.user).count(), 1)

        resp = self.client.delete("/api/tries/draft/")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(TryDraft.objects.exists())
