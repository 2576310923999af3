# authx/views.py
import logging

from django.conf import settings
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import UserSerializer
from users.services import provision_user

logger = logging.getLogger("tryfield.auth")


def issue_tokens(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
    }


class GoogleLoginView(APIView):
    """
    POST /api/auth/google/   {"id_token": "..."}

    Verifies a Google ID token, provisions the local profile on first
    sign-in and returns a JWT pair.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        token = request.data.get("id_token")
        if not token:
            return Response({"error": "ID Token is required"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            # Audience is enforced when a client ID is configured
            id_info = id_token.verify_oauth2_token(
                token,
                google_requests.Request(),
                settings.GOOGLE_OAUTH_CLIENT_ID or None,
            )
        except ValueError as e:
            logger.warning(f"Rejected Google ID token: {e}")
            return Response({"error": f"Invalid token: {str(e)}"}, status=status.HTTP_400_BAD_REQUEST)

        subject = id_info.get("sub")
        if not subject:
            return Response({"error": "Subject not found in token"}, status=status.HTTP_400_BAD_REQUEST)

        user = provision_user(
            provider_uid=f"google:{subject}",
            email=id_info.get("email"),
            display_name=id_info.get("name"),
            photo_url=id_info.get("picture"),
        )
        if not user.is_active:
            return Response({"error": "Account is disabled"}, status=status.HTTP_403_FORBIDDEN)

        payload = issue_tokens(user)
        payload["user"] = UserSerializer(user).data
        return Response(payload)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        return Response({
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "display_name": user.display_name,
            "provider_uid": user.provider_uid,
        })
