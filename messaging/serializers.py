from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import DMMessage, DMRoom, TryChatMessage


class DMRoomSerializer(serializers.ModelSerializer):
    other_user = serializers.SerializerMethodField()

    class Meta:
        model = DMRoom
        fields = ["id", "other_user", "last_message", "last_updated", "unread_count", "created_at"]
        read_only_fields = fields

    def get_other_user(self, obj):
        viewer = self.context.get("viewer")
        if viewer is None:
            return None
        return UserSummarySerializer(obj.other_user(viewer)).data


class CreateDMRoomSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()


class DMMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = DMMessage
        fields = ["id", "room", "sender", "sender_name", "sender_photo", "text", "is_read", "created_at"]
        read_only_fields = ["id", "room", "sender", "sender_name", "sender_photo", "is_read", "created_at"]


class TryChatMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = TryChatMessage
        fields = ["id", "user", "user_name", "user_photo", "content", "is_organizer", "created_at"]
        read_only_fields = ["id", "user", "user_name", "user_photo", "is_organizer", "created_at"]
