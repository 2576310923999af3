import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

NOTIFICATION_TYPES = [
    ("try_joined", "Try joined"),
    ("try_completed", "Try completed"),
    ("try_updated", "Try updated"),
    ("try_application", "Try application"),
    ("chat_message", "Chat message"),
    ("application_approved", "Application approved"),
    ("application_rejected", "Application rejected"),
    ("try_review", "Try review"),
    ("date_changed", "Date changed"),
    ("bulk_notification", "Bulk notification"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("tries", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="NotificationOutbox",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=NOTIFICATION_TYPES, max_length=64)),
                ("title", models.CharField(blank=True, max_length=255)),
                ("message", models.TextField(blank=True)),
                ("link", models.CharField(blank=True, max_length=255, null=True)),
                ("chat_id", models.CharField(blank=True, max_length=64, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("recipient_ids", models.JSONField(default=list)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed")], default="pending", max_length=16)),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("try_ref", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notification_outboxes", to="tries.try")),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["status", "updated_at"], name="outbox_status_updated_idx")],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=NOTIFICATION_TYPES, max_length=64)),
                ("title", models.CharField(blank=True, max_length=255)),
                ("message", models.TextField(blank=True)),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("chat_id", models.CharField(blank=True, max_length=64, null=True)),
                ("link", models.CharField(blank=True, max_length=255, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("outbox", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="notifications", to="notifications.notificationoutbox")),
                ("try_ref", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="tries.try")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "is_read"], name="notif_user_read_idx"),
                    models.Index(fields=["type"], name="notif_type_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("outbox", "user"), name="unique_outbox_delivery"),
                ],
            },
        ),
    ]
