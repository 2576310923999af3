# tries/views/completion.py
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import DomainError
from core.generics import api_error
from tries.models import Try, TryReview
from tries.serializers import TryCompletionSerializer, TryReviewSerializer
from tries import services

User = get_user_model()


class CompleteTryView(APIView):
    """
    POST /api/tries/<try_id>/complete/
    {"completion_status": "completed|partially_completed|not_completed", "comment": "..."}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        serializer = TryCompletionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            completion = services.complete_try(
                try_obj,
                request.user,
                completion_status=serializer.validated_data["completion_status"],
                comment=serializer.validated_data.get("comment", ""),
            )
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(TryCompletionSerializer(completion).data, status=status.HTTP_201_CREATED)


class TryReviewListCreateView(APIView):
    """
    GET /api/tries/<try_id>/reviews/
    POST /api/tries/<try_id>/reviews/   {"reviewed_user_id": 3, "rating": 5, "comment": "..."}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        qs = TryReview.objects.filter(try_ref=try_obj).select_related("reviewer", "reviewed_user")
        return Response(TryReviewSerializer(qs, many=True).data)

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        serializer = TryReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reviewed = get_object_or_404(User, pk=serializer.validated_data["reviewed_user_id"])
        try:
            review = services.create_review(
                try_obj,
                request.user,
                reviewed,
                rating=serializer.validated_data["rating"],
                comment=serializer.validated_data.get("comment", ""),
            )
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(TryReviewSerializer(review).data, status=status.HTTP_201_CREATED)
