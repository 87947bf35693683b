"""
Django Ninja API configuration.

All ApiError subclasses are mapped here to ``{"success": false, "message": ...}``
responses; views and services only raise.
"""

import time
from datetime import UTC, datetime

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI
from ninja.errors import AuthenticationError as NinjaAuthenticationError
from ninja.errors import HttpError, ValidationError

from apps.accounts.api import router as auth_router
from apps.accounts.api import users_router
from apps.core.exceptions import AUTH_FAILURE_MESSAGES, ApiError, AuthFailure, RateLimitedError
from apps.core.logging import get_logger

logger = get_logger(__name__)

API_NAME = "Vishwakarma Venture API"
API_VERSION = "1.0.0"

STARTED_AT = time.monotonic()

api = NinjaAPI(
    title=API_NAME,
    version=API_VERSION,
    description="Phone OTP authentication and member registry.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "auth",
                "description": "OTP authentication, registration and profile",
            },
            {
                "name": "users",
                "description": "Member directory",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Session token from /api/auth/verify-otp or /api/auth/register-user. Include as: Authorization: Bearer <token>",
                }
            }
        },
    },
)

# Register routers
api.add_router("/api/auth", auth_router)
api.add_router("/api/users", users_router)


def _error(request: HttpRequest, message: str, status: int) -> HttpResponse:
    return api.create_response(request, {"success": False, "message": message}, status=status)


@api.exception_handler(ApiError)
def handle_api_error(request: HttpRequest, exc: ApiError) -> HttpResponse:
    if exc.status_code >= 500:
        logger.error("api_error", error_type=type(exc).__name__, message=exc.message, path=request.path)
    response = _error(request, exc.message, exc.status_code)
    if isinstance(exc, RateLimitedError):
        response["Retry-After"] = str(exc.retry_after)
    return response


@api.exception_handler(ValidationError)
def handle_validation_error(request: HttpRequest, exc: ValidationError) -> HttpResponse:
    """Report the first failing field by name."""
    error = exc.errors[0] if exc.errors else {}
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "payload")]
    field = loc[-1] if loc else "body"
    if error.get("type") == "missing":
        message = f"{field} is required"
    else:
        message = f"Invalid {field}: {str(error.get('msg', 'invalid value')).removeprefix('Value error, ')}"
    logger.info("request_validation_failed", path=request.path, field=field, error_type=error.get("type"))
    return _error(request, message, 400)


@api.exception_handler(NinjaAuthenticationError)
def handle_ninja_auth_error(request: HttpRequest, exc: NinjaAuthenticationError) -> HttpResponse:
    return _error(request, AUTH_FAILURE_MESSAGES[AuthFailure.INVALID], 401)


@api.exception_handler(HttpError)
def handle_http_error(request: HttpRequest, exc: HttpError) -> HttpResponse:
    return _error(request, str(exc), exc.status_code)


@api.exception_handler(Exception)
def handle_unexpected_error(request: HttpRequest, exc: Exception) -> HttpResponse:
    logger.exception("unhandled_error", path=request.path, method=request.method)
    return _error(request, "Internal server error", 500)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """
    Health check endpoint for load balancer.

    Always 200; ``server.status`` is ``degraded`` when the database is unreachable.
    """
    try:
        connection.ensure_connection()
        database = {"status": "connected", "connected": True}
    except DatabaseError as e:
        logger.warning("health_database_unreachable", error=str(e))
        database = {"status": "disconnected", "connected": False}

    return {
        "success": True,
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "server": {
            "status": "healthy" if database["connected"] else "degraded",
            "environment": settings.ENVIRONMENT,
        },
        "database": database,
    }


@api.get("/", tags=["health"], operation_id="apiInfo", summary="API info")
def api_info(request: HttpRequest) -> dict:
    return {"name": API_NAME, "version": API_VERSION, "status": "running"}
