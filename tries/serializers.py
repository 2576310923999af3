# tries/serializers.py
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Try, TryParticipant, TryComment, TryCompletion, TryReview, TryDraft
from .sanitizers import normalize_dates, normalize_tags, sanitize_description, sanitize_title


class TrySerializer(serializers.ModelSerializer):
    organizer = UserSummarySerializer(read_only=True)
    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = Try
        fields = [
            "id",
            "title",
            "category",
            "description",
            "dates",
            "location",
            "capacity",
            "image_urls",
            "tags",
            "seeking_companion",
            "auto_approve",
            "status",
            "organizer",
            "participant_count",
            "created_at",
            "updated_at",
            "completed_at",
        ]
        read_only_fields = ["id", "status", "organizer", "created_at", "updated_at", "completed_at"]

    def get_participant_count(self, obj):
        annotated = getattr(obj, "approved_count", None)
        if annotated is not None:
            return annotated
        return obj.participant_count

    def validate_title(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("タイトルは必須です")
        return value

    def validate_description(self, value):
        return sanitize_description(value)

    def validate_capacity(self, value):
        if value is None or value < 1:
            raise serializers.ValidationError("定員は1以上で指定してください")
        return value

    def validate_dates(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("dates must be a list")
        try:
            return normalize_dates(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def validate_tags(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("tags must be a list")
        try:
            return normalize_tags(value, Try.MAX_TAGS)
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def validate_image_urls(self, value):
        if not isinstance(value, list) or not all(isinstance(u, str) for u in value):
            raise serializers.ValidationError("image_urls must be a list of URLs")
        return value

    def validate(self, attrs):
        # dates are required on create only
        if self.instance is None and "dates" not in attrs:
            raise serializers.ValidationError({"dates": "日程を1つ以上指定してください"})
        return attrs


class ParticipantSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    try_id = serializers.IntegerField(source="try_ref_id", read_only=True)

    class Meta:
        model = TryParticipant
        fields = ["id", "try_id", "user", "status", "name", "email", "introduction", "created_at", "updated_at"]
        read_only_fields = fields


class PublicParticipantSerializer(serializers.ModelSerializer):
    """What non-organizers see of other participants."""
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = TryParticipant
        fields = ["id", "user", "status", "created_at"]
        read_only_fields = fields


class ApplicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    introduction = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class MyApplicationSerializer(serializers.ModelSerializer):
    try_id = serializers.IntegerField(source="try_ref_id", read_only=True)
    try_title = serializers.CharField(source="try_ref.title", read_only=True)
    try_status = serializers.CharField(source="try_ref.status", read_only=True)

    class Meta:
        model = TryParticipant
        fields = ["id", "try_id", "try_title", "try_status", "status", "created_at", "updated_at"]
        read_only_fields = fields


class TryCommentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = TryComment
        fields = ["id", "user", "content", "created_at"]
        read_only_fields = ["id", "user", "created_at"]

    def validate_content(self, value):
        value = sanitize_description(value)
        if not value:
            raise serializers.ValidationError("コメントを入力してください")
        return value


class TryCompletionSerializer(serializers.ModelSerializer):
    class Meta:
        model = TryCompletion
        fields = ["id", "completion_status", "comment", "completed_by", "created_at"]
        read_only_fields = ["id", "completed_by", "created_at"]


class TryReviewSerializer(serializers.ModelSerializer):
    reviewer = UserSummarySerializer(read_only=True)
    reviewed_user = UserSummarySerializer(read_only=True)
    reviewed_user_id = serializers.IntegerField(write_only=True)

    class Meta:
        model = TryReview
        fields = ["id", "reviewer", "reviewed_user", "reviewed_user_id", "rating", "comment", "created_at"]
        read_only_fields = ["id", "reviewer", "reviewed_user", "created_at"]

    def validate_rating(self, value):
        if value < 1 or value > 5:
            raise serializers.ValidationError("Rating must be between 1 and 5")
        return value


class TryDraftSerializer(serializers.ModelSerializer):
    class Meta:
        model = TryDraft
        fields = ["title", "description", "seeking_companion", "tags", "images", "last_modified"]
        read_only_fields = ["last_modified"]

    def validate_images(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("images must be a list")
        for item in value:
            if not isinstance(item, dict) or "preview" not in item:
                raise serializers.ValidationError("each image needs a preview")
        return [
            {"preview": item["preview"], "name": item.get("name", ""), "type": item.get("type", "")}
            for item in value
        ]
