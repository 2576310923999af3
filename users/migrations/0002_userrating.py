import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("users", "0001_initial"),
        ("tries", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="UserRating",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("comment", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("rated", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ratings_received", to=settings.AUTH_USER_MODEL)),
                ("rater", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ratings_given", to=settings.AUTH_USER_MODEL)),
                ("try_ref", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="user_ratings", to="tries.try")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["rated", "created_at"], name="rating_rated_created_idx")],
                "constraints": [models.UniqueConstraint(fields=("rater", "rated", "try_ref"), name="unique_user_rating_per_try")],
            },
        ),
    ]
