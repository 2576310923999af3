# messaging/views.py
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import DomainError
from core.generics import api_error, parse_pagination
from tries.models import Try
from tries.policies import TryPolicy
from .models import DMMessage, DMRoom, TryChatMessage
from .serializers import (
    CreateDMRoomSerializer,
    DMMessageSerializer,
    DMRoomSerializer,
    TryChatMessageSerializer,
)
from . import services

User = get_user_model()


class DMRoomListCreateView(APIView):
    """
    GET /api/dm/rooms/
    POST /api/dm/rooms/   {"user_id": 3}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rooms = services.rooms_for(request.user)
        return Response(DMRoomSerializer(rooms, many=True, context={"viewer": request.user}).data)

    def post(self, request):
        serializer = CreateDMRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        other = get_object_or_404(User, pk=serializer.validated_data["user_id"], is_active=True)

        try:
            room, created = services.get_or_create_dm_room(request.user, other)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(
            DMRoomSerializer(room, context={"viewer": request.user}).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class DMMessageListCreateView(APIView):
    """
    GET /api/dm/rooms/<room_id>/messages/    (opening the room marks it read)
    POST /api/dm/rooms/<room_id>/messages/   {"text": "..."}
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "chat-send"

    def get_throttles(self):
        if self.request.method == "POST":
            return super().get_throttles()
        return []

    def get_room(self, request, room_id):
        room = get_object_or_404(DMRoom, pk=room_id)
        if not room.has_participant(request.user):
            return None
        return room

    def get(self, request, room_id):
        room = self.get_room(request, room_id)
        if room is None:
            return api_error("Not a participant of this room", status.HTTP_403_FORBIDDEN)

        services.mark_room_read(room, request.user)
        messages = DMMessage.objects.filter(room=room)
        return Response(DMMessageSerializer(messages, many=True).data)

    def post(self, request, room_id):
        room = self.get_room(request, room_id)
        if room is None:
            return api_error("Not a participant of this room", status.HTTP_403_FORBIDDEN)

        serializer = DMMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            message = services.send_dm(room, request.user, serializer.validated_data["text"])
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(DMMessageSerializer(message).data, status=status.HTTP_201_CREATED)


class TryChatView(APIView):
    """
    GET /api/tries/<try_id>/chat/
    POST /api/tries/<try_id>/chat/   {"content": "..."}

    Open to the organizer and approved participants only.
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "chat-send"

    def get_throttles(self):
        if self.request.method == "POST":
            return super().get_throttles()
        return []

    def get(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        can, reason = TryPolicy.can_access_chat(request.user, try_obj)
        if not can:
            return api_error(reason, status.HTTP_403_FORBIDDEN)

        try:
            limit, offset = parse_pagination(request, default_limit=100, max_limit=500)
        except ValueError:
            return api_error("Invalid pagination parameters")

        qs = TryChatMessage.objects.filter(try_ref=try_obj)
        return Response({
            "results": TryChatMessageSerializer(qs[offset:offset + limit], many=True).data,
            "count": qs.count(),
            "contacts": services.visible_contacts(try_obj, request.user),
        })

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        serializer = TryChatMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            message = services.post_chat_message(try_obj, request.user, serializer.validated_data["content"])
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(TryChatMessageSerializer(message).data, status=status.HTTP_201_CREATED)


class ContactShareView(APIView):
    """
    POST /api/tries/<try_id>/chat/contact-share/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        try:
            share = services.share_contact(try_obj, request.user)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response({
            "shared": True,
            "email": share.email,
            "contacts": services.visible_contacts(try_obj, request.user),
        })
