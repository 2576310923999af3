import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("tries", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DMRoom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("last_message", models.TextField(blank=True)),
                ("last_updated", models.DateTimeField(auto_now_add=True)),
                ("unread_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user_high", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="dm_rooms_high", to=settings.AUTH_USER_MODEL)),
                ("user_low", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="dm_rooms_low", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-last_updated"],
                "constraints": [
                    models.UniqueConstraint(fields=("user_low", "user_high"), name="unique_dm_pair"),
                    models.CheckConstraint(condition=models.Q(("user_low__lt", models.F("user_high"))), name="dm_pair_ordered"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DMMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sender_name", models.CharField(blank=True, max_length=100)),
                ("sender_photo", models.CharField(blank=True, max_length=1024, null=True)),
                ("text", models.TextField()),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("room", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="messages", to="messaging.dmroom")),
                ("sender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="dm_messages_sent", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["room", "is_read"], name="dm_room_read_idx")],
            },
        ),
        migrations.CreateModel(
            name="TryChatMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_name", models.CharField(blank=True, max_length=100)),
                ("user_photo", models.CharField(blank=True, max_length=1024, null=True)),
                ("content", models.TextField()),
                ("is_organizer", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="chat_messages", to="tries.try")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="try_chat_messages", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["try_ref", "created_at"], name="chat_try_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="ContactShare",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contact_shares", to="tries.try")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contact_shares", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("try_ref", "user"), name="unique_contact_share"),
                ],
            },
        ),
    ]
