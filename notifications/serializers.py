from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    try_id = serializers.IntegerField(source="try_ref_id", read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "is_read",
            "created_at",
            "try_id",
            "chat_id",
            "link",
            "metadata",
        ]
        read_only_fields = fields


class BulkNotificationSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    link = serializers.CharField(max_length=255, required=False, allow_blank=True)
