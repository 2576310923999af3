# users/models.py
from django.contrib.auth.models import AbstractUser
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class User(AbstractUser):
    # Stable subject ID from the external identity provider, e.g.
    # "google:1234..." or "supabase:<uuid>". Sign-in is federated only.
    provider_uid = models.CharField(max_length=255, unique=True, null=True, blank=True)

    display_name = models.CharField(max_length=100, blank=True)
    photo_url = models.CharField(max_length=1024, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)

    # Denormalized rating summary, recomputed by users.ratings
    rating_average = models.FloatField(default=0.0)
    rating_count = models.PositiveIntegerField(default=0)
    rating_distribution = models.JSONField(default=dict, blank=True)

    def __str__(self):
        return self.display_name or self.username

    @property
    def public_name(self) -> str:
        return self.display_name or self.username


class PrivacySettings(models.Model):
    """
    Per-user visibility rules. Created with defaults on first read.
    """
    VISIBILITY_PUBLIC = "public"
    VISIBILITY_REGISTERED = "registered"
    VISIBILITY_PRIVATE = "private"

    VISIBILITY_CHOICES = [
        (VISIBILITY_PUBLIC, "Public"),
        (VISIBILITY_REGISTERED, "Registered users"),
        (VISIBILITY_PRIVATE, "Private"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="privacy_settings",
    )
    profile_visibility = models.CharField(max_length=16, choices=VISIBILITY_CHOICES, default=VISIBILITY_REGISTERED)

    email_visibility = models.CharField(max_length=16, choices=VISIBILITY_CHOICES, default=VISIBILITY_PRIVATE)

    tries_visibility = models.CharField(max_length=16, choices=VISIBILITY_CHOICES, default=VISIBILITY_REGISTERED)
    evaluations_visibility = models.CharField(max_length=16, choices=VISIBILITY_CHOICES, default=VISIBILITY_REGISTERED)
    participations_visibility = models.CharField(max_length=16, choices=VISIBILITY_CHOICES, default=VISIBILITY_REGISTERED)

    searchable = models.BooleanField(default=True)
    allow_direct_messages = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Privacy settings"

    def __str__(self):
        return f"Privacy settings for {self.user}"


class UserRating(models.Model):
    """
    Peer rating left after a try. One per (rater, rated, try).
    """
    rater = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings_given",
    )
    rated = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings_received",
    )
    try_ref = models.ForeignKey(
        "tries.Try",
        on_delete=models.CASCADE,
        related_name="user_ratings",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["rater", "rated", "try_ref"],
                name="unique_user_rating_per_try",
            ),
        ]
        indexes = [
            models.Index(fields=["rated", "created_at"], name="rating_rated_created_idx"),
        ]

    def __str__(self):
        return f"{self.rater} -> {self.rated} ({self.rating})"
