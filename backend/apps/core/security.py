"""
Core security - authentication classes for API.
"""

from django.http import HttpRequest
from ninja.security import HttpBearer

from apps.accounts.tokens import SessionClaims, get_token_issuer
from apps.core.exceptions import AuthenticationError, AuthFailure


class BearerAuth(HttpBearer):
    """
    Bearer session token authentication for API endpoints.

    Unlike the stock HttpBearer, every failure raises AuthenticationError
    with a reason-specific message instead of a generic 401. On success
    ``request.auth`` holds the verified SessionClaims.
    """

    def __call__(self, request: HttpRequest) -> SessionClaims:
        header = request.headers.get(self.header)
        if not header:
            raise AuthenticationError(AuthFailure.MISSING)

        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            raise AuthenticationError(AuthFailure.MALFORMED)

        token = parts[1]
        if not token:
            raise AuthenticationError(AuthFailure.MISSING, "Token is required")

        return self.authenticate(request, token)

    def authenticate(self, request: HttpRequest, token: str) -> SessionClaims:
        """Verify the token; raises TokenExpiredError or TokenInvalidError."""
        return get_token_issuer().verify(token)
