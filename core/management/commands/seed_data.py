from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from tries.models import ParticipantStatus, Try, TryParticipant, TryComment

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with sample users, tries and participations"

    def handle(self, *args, **options):
        self.stdout.write("🌱 Seeding data...")

        # 1. Users (federated in production; local placeholders here)
        people = {}
        for username, name in [("aoi", "あおい"), ("ren", "れん"), ("mio", "みお")]:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "email": f"{username}@example.com",
                    "display_name": name,
                    "provider_uid": f"seed:{username}",
                },
            )
            if created:
                user.set_unusable_password()
                user.save(update_fields=["password"])
            people[username] = user

        # 2. Tries
        today = timezone.localdate()
        tries_data = [
            {
                "title": "朝ラン10km",
                "category": Try.CATEGORY_SPORTS,
                "description": "皇居の周りを一緒に走りましょう。",
                "dates": [(today + timedelta(days=3)).isoformat()],
                "location": "東京都千代田区",
                "capacity": 3,
                "tags": ["ランニング", "朝活"],
                "auto_approve": True,
            },
            {
                "title": "週末ハッカソン",
                "category": Try.CATEGORY_PROJECT,
                "description": "48時間でプロトタイプを作ります。",
                "dates": [
                    (today + timedelta(days=10)).isoformat(),
                    (today + timedelta(days=11)).isoformat(),
                ],
                "location": "オンライン",
                "capacity": 5,
                "tags": ["開発", "チーム"],
            },
        ]

        for data in tries_data:
            try_obj, created = Try.objects.get_or_create(
                title=data["title"],
                organizer=people["aoi"],
                defaults=data,
            )
            if created:
                self.stdout.write(f"Created try: {try_obj.title}")

            TryParticipant.objects.get_or_create(
                try_ref=try_obj,
                user=people["ren"],
                defaults={"status": ParticipantStatus.APPROVED, "name": people["ren"].display_name},
            )
            TryParticipant.objects.get_or_create(
                try_ref=try_obj,
                user=people["mio"],
                defaults={"status": ParticipantStatus.PENDING, "name": people["mio"].display_name},
            )
            TryComment.objects.get_or_create(
                try_ref=try_obj,
                user=people["ren"],
                content="楽しみにしています！",
            )

        self.stdout.write(self.style.SUCCESS("✅ Seeding complete"))
