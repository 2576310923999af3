# tries/views/participants.py
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import DomainError
from core.generics import api_error
from tries.models import ParticipantStatus, Try, TryParticipant
from tries.policies import TryPolicy
from tries.serializers import (
    ApplicationSerializer,
    MyApplicationSerializer,
    ParticipantSerializer,
    PublicParticipantSerializer,
)
from tries import services


class ApplyToTryView(APIView):
    """
    POST /api/tries/<try_id>/apply/
    {"name": "...", "email": "...", "introduction": "..."}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        serializer = ApplicationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            participant = services.apply_to_try(try_obj, request.user, **serializer.validated_data)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)


class JoinTryView(APIView):
    """
    POST /api/tries/<try_id>/join/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        try:
            participant = services.join_try(try_obj, request.user)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)


class CancelParticipationView(APIView):
    """
    POST /api/tries/<try_id>/cancel/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        try:
            participant = services.cancel_participation(try_obj, request.user)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(ParticipantSerializer(participant).data)


class ParticipantDecisionView(APIView):
    """
    POST /api/tries/participants/<participant_id>/approve/
    POST /api/tries/participants/<participant_id>/reject/
    """
    permission_classes = [IsAuthenticated]
    approve = True

    def post(self, request, participant_id):
        try:
            if self.approve:
                participant = services.approve_participant(participant_id, request.user)
            else:
                participant = services.reject_participant(participant_id, request.user)
        except DomainError as e:
            return api_error(e.message, e.status_code)

        return Response(ParticipantSerializer(participant).data)


class TryParticipantsView(APIView):
    """
    GET /api/tries/<try_id>/participants/

    The organizer sees every application; everybody else only the
    approved participants.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, try_id):
        try_obj = get_object_or_404(Try, pk=try_id)
        qs = TryParticipant.objects.filter(try_ref=try_obj).select_related("user")

        if TryPolicy.can_view_all_participants(request.user, try_obj):
            status_filter = request.query_params.get("status")
            if status_filter:
                qs = qs.filter(status=status_filter)
            return Response(ParticipantSerializer(qs, many=True).data)

        qs = qs.filter(status=ParticipantStatus.APPROVED)
        return Response(PublicParticipantSerializer(qs, many=True).data)


class MyApplicationsView(APIView):
    """
    GET /api/tries/me/applications/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = (
            TryParticipant.objects
            .filter(user=request.user)
            .select_related("try_ref")
            .order_by("-created_at")
        )
        return Response(MyApplicationSerializer(qs, many=True).data)
