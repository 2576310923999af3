# tries/views/comments.py
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.generics import api_error, parse_pagination
from tries.models import Try, TryComment
from tries.serializers import TryCommentSerializer
from tries import services


class TryCommentListCreateView(APIView):
    """
    GET /api/tries/<try_id>/comments/   newest first
    POST /api/tries/<try_id>/comments/  {"content": "..."}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        try:
            limit, offset = parse_pagination(request)
        except ValueError:
            return api_error("Invalid pagination parameters")

        qs = TryComment.objects.filter(try_ref=try_obj).select_related("user").order_by("-created_at", "-id")
        return Response({
            "results": TryCommentSerializer(qs[offset:offset + limit], many=True).data,
            "count": qs.count(),
            "limit": limit,
            "offset": offset,
        })

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        serializer = TryCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = services.add_comment(try_obj, request.user, serializer.validated_data["content"])
        return Response(TryCommentSerializer(comment).data, status=status.HTTP_201_CREATED)
