import logging
import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework import status

from .generics import api_error
from .supabase_client import IMAGE_KINDS, StorageError, upload_image

logger = logging.getLogger("tryfield.storage")

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")


class ImageUploadView(APIView):
    """
    POST /api/core/uploads/images/
    multipart: file=<binary>, kind=tries|avatars

    Stores the blob in object storage and returns its public URL.
    The URL (never the bytes) is what gets embedded in records.
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]
    throttle_scope = "image-upload"

    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return api_error("file is required")

        kind = request.data.get("kind", "tries")
        if kind not in IMAGE_KINDS:
            return api_error(f"kind must be one of: {', '.join(IMAGE_KINDS)}")

        if upload.content_type not in ALLOWED_IMAGE_TYPES:
            return api_error("Unsupported image type")

        if upload.size > settings.MAX_UPLOAD_IMAGE_BYTES:
            return api_error("Image is too large")

        try:
            url = upload_image(
                owner_id=request.user.id,
                kind=kind,
                filename=upload.name,
                content=upload.read(),
                content_type=upload.content_type,
            )
        except StorageError as e:
            logger.warning(f"Image upload failed for user {request.user.id}: {e}")
            return api_error("画像のアップロードに失敗しました", status.HTTP_502_BAD_GATEWAY)

        return Response({"url": url}, status=status.HTTP_201_CREATED)


class HealthCheckView(APIView):
    """
    Lightweight health endpoint for uptime checks.
    - Checks DB connectivity
    - Returns env and simple latency
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        start = time.time()

        db_ok = True
        try:
            connections["default"].cursor()
        except OperationalError:
            db_ok = False

        duration_ms = int((time.time() - start) * 1000)

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": duration_ms,
            }
        )
