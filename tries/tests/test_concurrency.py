import threading

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from core.exceptions import DomainError
from users.models import User
from tries import services
from tries.models import ParticipantStatus, Try, TryParticipant


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentAdmissionTestCase(TransactionTestCase):
    """Row locks on the try keep approvals within capacity under load."""

    def setUp(self):
        self.organizer = User.objects.create_user(username="organizer", password="pass")
        self.alice = User.objects.create_user(username="alice", password="pass")
        self.bob = User.objects.create_user(username="bob", password="pass")
        self.try_obj = Try.objects.create(
            organizer=self.organizer,
            title="夜の天体観測",
            dates=["2030-08-01"],
            capacity=1,
        )

    def run_together(self, *calls):
        barrier = threading.Barrier(len(calls))
        outcomes = []
        outcomes_lock = threading.Lock()

        def worker(call):
            try:
                barrier.wait()
                call()
                outcome = "ok"
            except DomainError as e:
                outcome = e.status_code
            finally:
                connection.close()
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def approved_count(self):
        return TryParticipant.objects.filter(try_ref=self.try_obj, status=ParticipantStatus.APPROVED).count()

    def test_parallel_approvals_admit_one(self):
        alice_p = TryParticipant.objects.create(try_ref=self.try_obj, user=self.alice)
        bob_p = TryParticipant.objects.create(try_ref=self.try_obj, user=self.bob)

        outcomes = self.run_together(
            lambda: services.approve_participant(alice_p.id, self.organizer),
            lambda: services.approve_participant(bob_p.id, self.organizer),
        )

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count(409), 1)
        self.assertEqual(self.approved_count(), 1)

    def test_parallel_auto_joins_admit_one(self):
        self.try_obj.auto_approve = True
        self.try_obj.save()

        outcomes = self.run_together(
            lambda: services.join_try(self.try_obj, self.alice),
            lambda: services.join_try(self.try_obj, self.bob),
        )

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count(409), 1)
        self.assertEqual(self.approved_count(), 1)
        self.assertEqual(TryParticipant.objects.filter(try_ref=self.try_obj).count(), 1)
