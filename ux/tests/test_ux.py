from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from users.models import User
from notifications.models import Notification
from messaging.services import get_or_create_dm_room, send_dm
from tries.models import ParticipantStatus, Try, TryParticipant


class DashboardTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="me", password="pass")
        self.other = User.objects.create_user(username="other", password="pass")
        self.client.force_authenticate(user=self.user)

    def test_empty_dashboard(self):
        resp = self.client.get("/api/ux/me/dashboard/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        stats = resp.json()["data"]["stats"]
        self.assertEqual(stats["organized_total"], 0)
        self.assertEqual(stats["organized_tries"], {"open": 0, "closed": 0, "completed": 0})
        self.assertEqual(stats["unread_notifications"], 0)
        self.assertEqual(stats["unread_dms"], 0)
        self.assertEqual(resp.json()["data"]["recent_notifications"], [])

    def test_counts(self):
        Try.objects.create(organizer=self.user, title="A", dates=["2030-01-01"])
        Try.objects.create(organizer=self.user, title="B", dates=["2030-01-01"], status=Try.STATUS_CLOSED)
        theirs = Try.objects.create(organizer=self.other, title="C", dates=["2030-01-01"])
        TryParticipant.objects.create(try_ref=theirs, user=self.user, status=ParticipantStatus.PENDING)

        Notification.objects.create(user=self.user, type=Notification.TYPE_BULK, title="t", message="m")
        Notification.objects.create(user=self.user, type=Notification.TYPE_BULK, title="t", message="m", is_read=True)

        room, _ = get_or_create_dm_room(self.other, self.user)
        send_dm(room, self.other, "hi")

        resp = self.client.get("/api/ux/me/dashboard/")
        data = resp.json()["data"]
        self.assertEqual(data["stats"]["organized_total"], 2)
        self.assertEqual(data["stats"]["organized_tries"]["closed"], 1)
        self.assertEqual(data["stats"]["participations"]["pending"], 1)
        self.assertEqual(data["stats"]["unread_notifications"], 1)
        self.assertEqual(data["stats"]["unread_dms"], 1)
        self.assertEqual(len(data["recent_notifications"]), 2)


class MatchedTriesTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="me", password="pass")
        self.other = User.objects.create_user(username="other", password="pass")
        self.client.force_authenticate(user=self.user)

        Try.objects.create(
            organizer=self.user, title="朝ラン", dates=["2030-01-01"],
            category=Try.CATEGORY_SPORTS, tags=["running"],
        )

    def make(self, title, **kwargs):
        kwargs.setdefault("dates", ["2030-02-01"])
        return Try.objects.create(organizer=self.other, title=title, **kwargs)

    def test_without_history_nothing_matches(self):
        self.client.force_authenticate(user=self.other)
        resp = self.client.get("/api/ux/tries/matched/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["data"], [])

    def test_tag_match_ranks_above_category_match(self):
        category_only = self.make("サッカー", category=Try.CATEGORY_SPORTS, tags=["soccer"])
        tagged = self.make("皇居ラン", category=Try.CATEGORY_OTHER, tags=["running"])
        self.make("読書会", category=Try.CATEGORY_OTHER, tags=["books"])

        resp = self.client.get("/api/ux/tries/matched/")
        ids = [item["id"] for item in resp.json()["data"]]
        self.assertEqual(ids, [tagged.id, category_only.id])

    def test_applied_and_closed_tries_are_excluded(self):
        applied = self.make("ラン1", tags=["running"])
        self.make("ラン2", tags=["running"], status=Try.STATUS_CLOSED)
        TryParticipant.objects.create(try_ref=applied, user=self.user, status=ParticipantStatus.PENDING)

        resp = self.client.get("/api/ux/tries/matched/")
        self.assertEqual(resp.json()["data"], [])
        self.assertEqual(resp.json()["meta"]["count"], 0)
