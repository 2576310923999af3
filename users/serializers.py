from rest_framework import serializers
from .models import User, PrivacySettings, UserRating


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'display_name',
            'photo_url',
            'bio',
            'rating_average',
            'rating_count',
            'date_joined',
        ]


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact author/participant card."""

    class Meta:
        model = User
        fields = ['id', 'display_name', 'photo_url']


class UpdateProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['display_name', 'photo_url', 'bio']

    def validate_display_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("表示名は必須です")
        return value


class PrivacySettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = PrivacySettings
        fields = [
            'profile_visibility',
            'email_visibility',
            'tries_visibility',
            'evaluations_visibility',
            'participations_visibility',
            'searchable',
            'allow_direct_messages',
            'updated_at',
        ]
        read_only_fields = ['updated_at']


class UserRatingSerializer(serializers.ModelSerializer):
    rater_name = serializers.CharField(source='rater.public_name', read_only=True)
    try_id = serializers.IntegerField(write_only=True)

    class Meta:
        model = UserRating
        fields = ['id', 'rater', 'rater_name', 'rated', 'try_ref', 'try_id', 'rating', 'comment', 'created_at']
        read_only_fields = ['id', 'rater', 'rater_name', 'rated', 'try_ref', 'created_at']

    def validate_rating(self, value):
        if value < 1 or value > 5:
            raise serializers.ValidationError("Rating must be between 1 and 5")
        return value
