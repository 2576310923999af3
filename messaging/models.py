# messaging/models.py
from django.conf import settings
from django.db import models


class DMRoom(models.Model):
    """
    Direct-message room between exactly two users, stored as an ordered
    pair so (A, B) and (B, A) map to the same row.
    """
    user_low = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dm_rooms_low",
    )
    user_high = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dm_rooms_high",
    )
    last_message = models.TextField(blank=True)
    last_updated = models.DateTimeField(auto_now_add=True)
    unread_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-last_updated"]
        constraints = [
            models.UniqueConstraint(fields=["user_low", "user_high"], name="unique_dm_pair"),
            models.CheckConstraint(
                condition=models.Q(user_low__lt=models.F("user_high")),
                name="dm_pair_ordered",
            ),
        ]

    def __str__(self):
        return f"DM {self.user_low_id} <-> {self.user_high_id}"

    @property
    def participant_ids(self):
        return (self.user_low_id, self.user_high_id)

    def has_participant(self, user) -> bool:
        return user.id in self.participant_ids

    def other_user(self, user):
        return self.user_high if user.id == self.user_low_id else self.user_low


class DMMessage(models.Model):
    room = models.ForeignKey(DMRoom, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dm_messages_sent",
    )
    # Snapshot at send time
    sender_name = models.CharField(max_length=100, blank=True)
    sender_photo = models.CharField(max_length=1024, blank=True, null=True)
    text = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["room", "is_read"], name="dm_room_read_idx"),
        ]

    def __str__(self):
        return f"{self.sender} in room {self.room_id}"


class TryChatMessage(models.Model):
    try_ref = models.ForeignKey("tries.Try", on_delete=models.CASCADE, related_name="chat_messages")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="try_chat_messages",
    )
    user_name = models.CharField(max_length=100, blank=True)
    user_photo = models.CharField(max_length=1024, blank=True, null=True)
    content = models.TextField()
    is_organizer = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["try_ref", "created_at"], name="chat_try_created_idx"),
        ]

    def __str__(self):
        return f"{self.user} in try {self.try_ref_id}"


class ContactShare(models.Model):
    """A member's consent to show their contact to other sharing members of a try."""
    try_ref = models.ForeignKey("tries.Try", on_delete=models.CASCADE, related_name="contact_shares")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contact_shares",
    )
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["try_ref", "user"], name="unique_contact_share"),
        ]

    def __str__(self):
        return f"{self.user} shares contact in try {self.try_ref_id}"
