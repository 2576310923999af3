# ux/views/matched.py

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ux.services.matched import get_matched_tries


class UXMatchedTriesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            limit = int(request.query_params.get("limit", 20))
        except ValueError:
            limit = 20
        limit = max(1, min(limit, 50))

        items = get_matched_tries(request.user, limit=limit)
        return Response({
            "meta": {"success": True, "count": len(items)},
            "data": items,
        })
