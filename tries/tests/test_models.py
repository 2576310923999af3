from django.db import IntegrityError, transaction
from django.test import TestCase

from users.models import User
from tries.models import ParticipantStatus, Try, TryParticipant
from tries.sanitizers import normalize_dates, normalize_tags


class TryModelTestCase(TestCase):
    def setUp(self):
        self.organizer = User.objects.create_user(username="o", password="pass")

    def test_capacity_must_be_at_least_one(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Try.objects.create(organizer=self.organizer, title="t", dates=["2030-01-01"], capacity=0)

    def test_one_participation_per_user(self):
        try_obj = Try.objects.create(organizer=self.organizer, title="t", dates=["2030-01-01"])
        user = User.objects.create_user(username="u", password="pass")
        TryParticipant.objects.create(try_ref=try_obj, user=user)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TryParticipant.objects.create(try_ref=try_obj, user=user)

    def test_participant_count_counts_approved_only(self):
        try_obj = Try.objects.create(organizer=self.organizer, title="t", dates=["2030-01-01"], capacity=5)
        for i, st in enumerate([ParticipantStatus.APPROVED, ParticipantStatus.PENDING, ParticipantStatus.APPROVED]):
            user = User.objects.create_user(username=f"p{i}", password="pass")
            TryParticipant.objects.create(try_ref=try_obj, user=user, status=st)

        self.assertEqual(try_obj.participant_count, 2)
        self.assertEqual(try_obj.link, f"/tries/{try_obj.id}")


class SanitizerTestCase(TestCase):
    def test_normalize_tags(self):
        self.assertEqual(normalize_tags([" a ", "b", "a", ""], 5), ["a", "b"])
        with self.assertRaises(ValueError):
            normalize_tags(["1", "2", "3", "4", "5", "6"], 5)

    def test_normalize_dates(self):
        self.assertEqual(normalize_dates(["2030-01-02", "2030-01-01", "2030-01-02"]), ["2030-01-01", "2030-01-02"])
        with self.assertRaises(ValueError):
            normalize_dates([])
        with self.assertRaises(ValueError):
            normalize_dates(["not-a-date"])
