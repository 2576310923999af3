import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Try",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("category", models.CharField(choices=[("event", "Event"), ("project", "Project"), ("recruitment", "Recruitment"), ("sports", "Sports"), ("other", "Other")], default="other", max_length=32)),
                ("description", models.TextField(blank=True)),
                ("dates", models.JSONField(default=list)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("capacity", models.PositiveIntegerField(default=1)),
                ("image_urls", models.JSONField(blank=True, default=list)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("seeking_companion", models.BooleanField(default=False)),
                ("auto_approve", models.BooleanField(default=False)),
                ("status", models.CharField(choices=[("open", "Open"), ("closed", "Closed"), ("completed", "Completed")], default="open", max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("organizer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="organized_tries", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="try_status_created_idx"),
                    models.Index(fields=["organizer", "created_at"], name="try_org_created_idx"),
                    models.Index(fields=["category"], name="try_category_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("capacity__gte", 1)), name="try_capacity_gte_1"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TryParticipant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected"), ("cancelled", "Cancelled")], default="pending", max_length=16)),
                ("name", models.CharField(blank=True, max_length=100)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("introduction", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="participants", to="tries.try")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="try_participations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["try_ref", "status"], name="participant_try_status_idx"),
                    models.Index(fields=["user", "status"], name="participant_user_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("try_ref", "user"), name="unique_participant_per_try"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TryComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("content", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="comments", to="tries.try")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="try_comments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="TryCompletion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("completion_status", models.CharField(choices=[("completed", "Completed"), ("partially_completed", "Partially completed"), ("not_completed", "Not completed")], max_length=32)),
                ("comment", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
                ("try_ref", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="completion", to="tries.try")),
            ],
        ),
        migrations.CreateModel(
            name="TryReview",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("comment", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("reviewed_user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="try_reviews_received", to=settings.AUTH_USER_MODEL)),
                ("reviewer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="try_reviews_given", to=settings.AUTH_USER_MODEL)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="reviews", to="tries.try")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("try_ref", "reviewer", "reviewed_user"), name="unique_review_per_try_pair"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TryDraft",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                ("seeking_companion", models.BooleanField(default=False)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("images", models.JSONField(blank=True, default=list)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="try_draft", to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
