from rest_framework.response import Response
from rest_framework import status


def api_error(message: str, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Small helper to standardize error responses across the apps.
    Always returns: {"error": "<message>"} with the given status code.
    """
    return Response({"error": message}, status=status_code)


def parse_pagination(request, default_limit=50, max_limit=100):
    """
    Read limit/offset query params. Returns (limit, offset) or raises
    ValueError for non-integer input.
    """
    limit = request.query_params.get("limit")
    offset = request.query_params.get("offset")

    limit_val = int(limit) if limit is not None else default_limit
    offset_val = int(offset) if offset is not None else 0

    limit_val = max(1, min(limit_val, max_limit))
    offset_val = max(0, offset_val)
    return limit_val, offset_val


def is_truthy(value) -> bool:
    return bool(value) and str(value).lower() in ("1", "true", "yes")
