# tries/views/drafts.py
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.generics import api_error
from tries.serializers import TryDraftSerializer
from tries import services


class TryDraftView(APIView):
    """
    GET /api/tries/draft/
    PUT /api/tries/draft/
    DELETE /api/tries/draft/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        draft = services.get_draft(request.user)
        if draft is None:
            return api_error("No draft saved", status.HTTP_404_NOT_FOUND)
        return Response(TryDraftSerializer(draft).data)

    def put(self, request):
        serializer = TryDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = services.save_draft(request.user, serializer.validated_data)
        return Response(TryDraftSerializer(draft).data)

    def delete(self, request):
        services.discard_draft(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
