# tries/views/tries.py
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import DomainError
from core.generics import api_error, parse_pagination
from tries.models import Try
from tries.serializers import TrySerializer
from tries import services


class TryListCreateView(APIView):
    """
    GET /api/tries/?keyword=&category=&status=&start_date=&end_date=&location=&tag=&mine=1
    POST /api/tries/
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "try-create"

    def get_throttles(self):
        # Only creation is rate limited
        if self.request.method == "POST":
            return super().get_throttles()
        return []

    def get(self, request):
        try:
            limit, offset = parse_pagination(request, default_limit=20)
        except ValueError:
            return api_error("Invalid pagination parameters")

        results = services.search_tries(request.query_params, request.user)
        total = len(results) if isinstance(results, list) else results.count()
        page = results[offset:offset + limit]

        return Response({
            "results": TrySerializer(page, many=True).data,
            "count": total,
            "limit": limit,
            "offset": offset,
        })

    def post(self, request):
        serializer = TrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try_obj = services.create_try(request.user, serializer.validated_data)
        return Response(TrySerializer(try_obj).data, status=status.HTTP_201_CREATED)


class TryDetailView(APIView):
    """
    GET / PATCH / DELETE /api/tries/<try_id>/
    """
    permission_classes = [IsAuthenticated]

    def get_try(self, try_id):
        qs = services.with_participant_count(Try.objects.select_related("organizer"))
        return get_object_or_404(qs, pk=try_id)

    def get(self, request, try_id):
        return Response(TrySerializer(self.get_try(try_id)).data)

    def patch(self, request, try_id):
        try_obj = self.get_try(try_id)
        serializer = TrySerializer(try_obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            updated = services.update_try(try_obj, request.user, serializer.validated_data)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(TrySerializer(self.get_try(updated.id)).data)

    def delete(self, request, try_id):
        try_obj = self.get_try(try_id)
        try:
            services.delete_try(try_obj, request.user)
        except DomainError as e:
            return api_error(e.message, e.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TryStatusView(APIView):
    """
    POST /api/tries/<try_id>/close/
    POST /api/tries/<try_id>/reopen/
    """
    permission_classes = [IsAuthenticated]
    target_status = None

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        try:
            services.change_try_status(try_obj, request.user, self.target_status)
        except DomainError as e:
            return api_error(e.message, e.status_code)
        return Response({"id": try_obj.id, "status": try_obj.status})
