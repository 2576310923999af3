# tries/models.py
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class Try(models.Model):
    STATUS_OPEN = "open"
    STATUS_CLOSED = "closed"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_COMPLETED, "Completed"),
    ]

    CATEGORY_EVENT = "event"
    CATEGORY_PROJECT = "project"
    CATEGORY_RECRUITMENT = "recruitment"
    CATEGORY_SPORTS = "sports"
    CATEGORY_OTHER = "other"

    CATEGORY_CHOICES = [
        (CATEGORY_EVENT, "Event"),
        (CATEGORY_PROJECT, "Project"),
        (CATEGORY_RECRUITMENT, "Recruitment"),
        (CATEGORY_SPORTS, "Sports"),
        (CATEGORY_OTHER, "Other"),
    ]

    MAX_TAGS = 5

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_tries",
    )
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default=CATEGORY_OTHER)
    description = models.TextField(blank=True)

    # ISO date strings ("2024-05-01"), at least one
    dates = models.JSONField(default=list)
    location = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(default=1)
    image_urls = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)

    seeking_companion = models.BooleanField(default=False)
    # One-click joins are approved immediately (first come, first served)
    auto_approve = models.BooleanField(default=False)

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_OPEN)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="try_capacity_gte_1",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="try_status_created_idx"),
            models.Index(fields=["organizer", "created_at"], name="try_org_created_idx"),
            models.Index(fields=["category"], name="try_category_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def participant_count(self) -> int:
        return self.participants.filter(status=ParticipantStatus.APPROVED).count()

    @property
    def link(self) -> str:
        return f"/tries/{self.id}"


class ParticipantStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    CANCELLED = "cancelled", "Cancelled"


class TryParticipant(models.Model):
    try_ref = models.ForeignKey(Try, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="try_participations",
    )
    status = models.CharField(
        max_length=16,
        choices=ParticipantStatus.choices,
        default=ParticipantStatus.PENDING,
    )

    # Application modal input
    name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    introduction = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["try_ref", "user"], name="unique_participant_per_try"),
        ]
        indexes = [
            models.Index(fields=["try_ref", "status"], name="participant_try_status_idx"),
            models.Index(fields=["user", "status"], name="participant_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.try_ref} ({self.status})"


class TryComment(models.Model):
    try_ref = models.ForeignKey(Try, on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="try_comments")
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Comment by {self.user} on {self.try_ref}"


class TryCompletion(models.Model):
    RESULT_COMPLETED = "completed"
    RESULT_PARTIAL = "partially_completed"
    RESULT_NOT_COMPLETED = "not_completed"

    RESULT_CHOICES = [
        (RESULT_COMPLETED, "Completed"),
        (RESULT_PARTIAL, "Partially completed"),
        (RESULT_NOT_COMPLETED, "Not completed"),
    ]

    try_ref = models.OneToOneField(Try, on_delete=models.CASCADE, related_name="completion")
    completed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    completion_status = models.CharField(max_length=32, choices=RESULT_CHOICES)
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.try_ref} - {self.completion_status}"


class TryReview(models.Model):
    try_ref = models.ForeignKey(Try, on_delete=models.CASCADE, related_name="reviews")
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="try_reviews_given",
    )
    reviewed_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="try_reviews_received",
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
                fields=["try_ref", "reviewer", "reviewed_user"],
                name="unique_review_per_try_pair",
            ),
        ]

    def __str__(self):
        return f"{self.reviewer} -> {self.reviewed_user} ({self.rating})"


class TryDraft(models.Model):
    """
    Unsaved create-form state, one per user. Dropped once the user
    publishes a try.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="try_draft",
    )
    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    seeking_companion = models.BooleanField(default=False)
    tags = models.JSONField(default=list, blank=True)
    # [{"preview": "data:image/png;base64,...", "name": "a.png", "type": "image/png"}]
    images = models.JSONField(default=list, blank=True)
    last_modified = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Draft of {self.user}"
