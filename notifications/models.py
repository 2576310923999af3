# notifications/models.py
from django.conf import settings
from django.db import models


class Notification(models.Model):
    TYPE_TRY_JOINED = "try_joined"
    TYPE_TRY_COMPLETED = "try_completed"
    TYPE_TRY_UPDATED = "try_updated"
    TYPE_TRY_APPLICATION = "try_application"
    TYPE_CHAT_MESSAGE = "chat_message"
    TYPE_APPLICATION_APPROVED = "application_approved"
    TYPE_APPLICATION_REJECTED = "application_rejected"
    TYPE_TRY_REVIEW = "try_review"
    TYPE_DATE_CHANGED = "date_changed"
    TYPE_BULK = "bulk_notification"

    TYPE_CHOICES = [
        (TYPE_TRY_JOINED, "Try joined"),
        (TYPE_TRY_COMPLETED, "Try completed"),
        (TYPE_TRY_UPDATED, "Try updated"),
        (TYPE_TRY_APPLICATION, "Try application"),
        (TYPE_CHAT_MESSAGE, "Chat message"),
        (TYPE_APPLICATION_APPROVED, "Application approved"),
        (TYPE_APPLICATION_REJECTED, "Application rejected"),
        (TYPE_TRY_REVIEW, "Try review"),
        (TYPE_DATE_CHANGED, "Date changed"),
        (TYPE_BULK, "Bulk notification"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=64, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255, blank=True)
    message = models.TextField(blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    # Optional references
    try_ref = models.ForeignKey(
        "tries.Try",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    chat_id = models.CharField(max_length=64, blank=True, null=True)
    link = models.CharField(max_length=255, blank=True, null=True)
    # old_date / new_date, sender_id, rating / reviewer_id
    metadata = models.JSONField(default=dict, blank=True)

    # Set when delivered through a fan-out outbox
    outbox = models.ForeignKey(
        "notifications.NotificationOutbox",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["outbox", "user"], name="unique_outbox_delivery"),
        ]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notif_user_read_idx"),
            models.Index(fields=["type"], name="notif_type_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.type} - {self.title}"


class NotificationOutbox(models.Model):
    """
    One pending multi-recipient notification. Written in the same
    transaction as the change that caused it and delivered by
    notifications.tasks.process_notification_outbox.
    """
    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    type = models.CharField(max_length=64, choices=Notification.TYPE_CHOICES)
    title = models.CharField(max_length=255, blank=True)
    message = models.TextField(blank=True)
    link = models.CharField(max_length=255, blank=True, null=True)
    try_ref = models.ForeignKey(
        "tries.Try",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notification_outboxes",
    )
    chat_id = models.CharField(max_length=64, blank=True, null=True)
    metadata = models.JSONField(default=dict, blank=True)
    recipient_ids = models.JSONField(default=list)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status", "updated_at"], name="outbox_status_updated_idx"),
        ]

    def __str__(self):
        return f"Outbox {self.id} - {self.type} ({self.status})"
