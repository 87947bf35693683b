"""
Custom type definitions for the application.

These types help mypy understand custom attributes added by middleware
and authentication.
"""

from typing import TYPE_CHECKING

from django.http import HttpRequest

if TYPE_CHECKING:
    from uuid import UUID

    from apps.accounts.tokens import SessionClaims


class AuthenticatedHttpRequest(HttpRequest):
    """
    HttpRequest on an endpoint guarded by BearerAuth.

    ``auth`` is set by django-ninja from BearerAuth's return value.
    ``correlation_id`` is set by RequestLoggingMiddleware.
    """

    auth: "SessionClaims"
    correlation_id: "UUID"
