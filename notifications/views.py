# notifications/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework import status

from core.generics import api_error, is_truthy, parse_pagination
from .models import Notification
from .serializers import NotificationSerializer, BulkNotificationSerializer
from . import services


class MyNotificationsView(APIView):
    """
    GET /api/notifications/
    GET /api/notifications/?unread=true
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            limit, offset = parse_pagination(request)
        except ValueError:
            return api_error("Invalid pagination parameters")

        qs = Notification.objects.filter(user=request.user)
        if is_truthy(request.query_params.get("unread")):
            qs = qs.filter(is_read=False)

        total = qs.count()
        serializer = NotificationSerializer(qs[offset:offset + limit], many=True)
        return Response({
            "results": serializer.data,
            "count": total,
            "limit": limit,
            "offset": offset,
        })


class MarkNotificationReadView(APIView):
    """
    POST /api/notifications/<id>/read/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, notification_id):
        if not services.mark_read(request.user, notification_id):
            return api_error("Notification not found", status.HTTP_404_NOT_FOUND)
        return Response({"id": notification_id, "is_read": True})


class MarkAllNotificationsReadView(APIView):
    """
    POST /api/notifications/read-all/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        updated = services.mark_all_read(request.user)
        return Response({"marked_read": updated}, status=status.HTTP_200_OK)


class UnreadCountView(APIView):
    """
    GET /api/notifications/unread-count/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"unread_count": services.unread_count(request.user)})


class BulkNotificationView(APIView):
    """
    POST /api/notifications/bulk/
    {"user_ids": [1, 2], "title": "...", "message": "...", "link": "/tries/3"}
    """
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = BulkNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outbox = services.queue_bulk_notification(
            recipient_ids=data["user_ids"],
            title=data["title"],
            message=data["message"],
            link=data.get("link") or None,
        )
        return Response(
            {"outbox_id": outbox.id, "recipients": len(outbox.recipient_ids)},
            status=status.HTTP_202_ACCEPTED,
        )
