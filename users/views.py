# users/views.py

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404

from core.exceptions import DomainError
from core.generics import api_error, parse_pagination
from tries.models import ParticipantStatus, Try, TryParticipant
from tries.serializers import MyApplicationSerializer, TrySerializer
from tries.services import with_participant_count
from .privacy import filter_user_data, get_privacy_settings, can_access_content
from .ratings import create_user_rating, get_rating_summary
from .services import search_users
from .models import UserRating
from .serializers import (
    UserSerializer,
    UpdateProfileSerializer,
    PrivacySettingsSerializer,
    UserRatingSerializer,
    UserSummarySerializer,
)

User = get_user_model()


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Standard User API
    """
    queryset = User.objects.filter(is_active=True)
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        # No public directory listing
        if self.action == 'list':
            return User.objects.none()
        return super().get_queryset()

    def retrieve(self, request, *args, **kwargs):
        user = self.get_object()
        data = filter_user_data(self.get_serializer(user).data, user, request.user)
        return Response(data)

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        """
        GET /api/users/me/
        PATCH /api/users/me/   {display_name, photo_url, bio}
        """
        if request.method == 'PATCH':
            serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['get', 'patch'], url_path='me/privacy')
    def privacy(self, request):
        """
        GET /api/users/me/privacy/
        PATCH /api/users/me/privacy/
        """
        settings_obj = get_privacy_settings(request.user)
        if request.method == 'PATCH':
            serializer = PrivacySettingsSerializer(settings_obj, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(serializer.data)
        return Response(PrivacySettingsSerializer(settings_obj).data)

    @action(detail=True, methods=['get', 'post'])
    def ratings(self, request, pk=None):
        """
        GET /api/users/{pk}/ratings/
        POST /api/users/{pk}/ratings/   {try_id, rating, comment}
        """
        rated = self.get_object()

        if request.method == 'GET':
            if not can_access_content(rated, request.user, "evaluations"):
                return api_error("評価は非公開です", status.HTTP_403_FORBIDDEN)
            qs = UserRating.objects.filter(rated=rated).select_related('rater')
            return Response(UserRatingSerializer(qs, many=True).data)

        serializer = UserRatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try_obj = get_object_or_404(Try, pk=serializer.validated_data['try_id'])

        try:
            rating = create_user_rating(
                rater=request.user,
                rated=rated,
                try_obj=try_obj,
                rating=serializer.validated_data['rating'],
                comment=serializer.validated_data.get('comment', ''),
            )
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(UserRatingSerializer(rating).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'], url_path='ratings/summary')
    def rating_summary(self, request, pk=None):
        """
        GET /api/users/{pk}/ratings/summary/
        """
        rated = self.get_object()
        return Response(get_rating_summary(rated))

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        GET /api/users/search/?q=<name>
        """
        query = (request.query_params.get('q') or '').strip()
        if not query:
            return api_error("q is required")
        users = search_users(query)
        return Response(UserSummarySerializer(users, many=True).data)

    @action(detail=True, methods=['get'])
    def tries(self, request, pk=None):
        """
        GET /api/users/{pk}/tries/   tries the user organizes
        """
        owner = self.get_object()
        if not can_access_content(owner, request.user, "tries"):
            return api_error("TRY一覧は非公開です", status.HTTP_403_FORBIDDEN)

        try:
            limit, offset = parse_pagination(request)
        except ValueError:
            return api_error("Invalid pagination parameters")

        qs = with_participant_count(
            Try.objects.filter(organizer=owner).select_related('organizer')
        ).order_by('-created_at', '-id')
        return Response(TrySerializer(qs[offset:offset + limit], many=True).data)

    @action(detail=True, methods=['get'])
    def participations(self, request, pk=None):
        """
        GET /api/users/{pk}/participations/   tries the user was approved for
        """
        owner = self.get_object()
        if not can_access_content(owner, request.user, "participations"):
            return api_error("参加履歴は非公開です", status.HTTP_403_FORBIDDEN)

        qs = (
            TryParticipant.objects
            .filter(user=owner, status=ParticipantStatus.APPROVED)
            .select_related('try_ref')
            .order_by('-created_at')
        )
        return Response(MyApplicationSerializer(qs, many=True).data)
