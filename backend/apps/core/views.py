"""
Plain Django views outside the API router.
"""

from django.http import HttpRequest, JsonResponse


def route_not_found(request: HttpRequest, exception: Exception | None = None) -> JsonResponse:
    """JSON 404 for any unmatched URL."""
    return JsonResponse({"success": False, "message": "Route not found"}, status=404)
