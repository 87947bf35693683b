"""
Session tokens.

Members authenticate with an HS256 JWT issued after OTP verification or
registration. The token carries the member id (``sub``) and phone number.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import jwt
from django.conf import settings

from apps.core.exceptions import AuthenticationError, AuthFailure, ConfigurationError
from apps.core.logging import get_logger

logger = get_logger(__name__)

SESSION_TOKEN_ALGORITHM = "HS256"


class TokenExpiredError(AuthenticationError):
    """Signature is valid but the token is past its expiry."""

    def __init__(self) -> None:
        super().__init__(AuthFailure.EXPIRED)


class TokenInvalidError(AuthenticationError):
    """Token is malformed, tampered with, or missing claims."""

    def __init__(self) -> None:
        super().__init__(AuthFailure.INVALID)


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token."""

    subject_id: str
    phone: str
    issued_at: datetime
    expires_at: datetime


class SessionTokenIssuer:
    """
    Issues and verifies session tokens.

    Args:
        secret: HMAC signing secret.
        lifetime: How long an issued token stays valid.

    Raises:
        ConfigurationError: If the secret is empty.
    """

    def __init__(self, secret: str, lifetime: timedelta) -> None:
        if not secret:
            raise ConfigurationError("Token signing is not configured")
        self._secret = secret
        self.lifetime = lifetime

    def issue(self, subject_id: str | int, phone: str, now: datetime | None = None) -> str:
        """Sign a token for ``subject_id``, valid for ``lifetime`` from ``now``."""
        issued_at = now or datetime.now(UTC)
        payload = {
            "sub": str(subject_id),
            "phone": phone,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=SESSION_TOKEN_ALGORITHM)
        logger.info("session_token_issued", member_id=str(subject_id))
        return token

    def verify(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry.

        Raises:
            TokenExpiredError: Valid signature, past expiry.
            TokenInvalidError: Bad signature, malformed token or missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[SESSION_TOKEN_ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("session_token_expired")
            raise TokenExpiredError() from None
        except jwt.InvalidTokenError as e:
            logger.warning("session_token_invalid", error=str(e))
            raise TokenInvalidError() from None

        phone = payload.get("phone")
        if not isinstance(phone, str) or not phone:
            logger.warning("session_token_invalid", error="missing phone claim")
            raise TokenInvalidError()

        return SessionClaims(
            subject_id=payload["sub"],
            phone=phone,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )


@lru_cache(maxsize=1)
def get_token_issuer() -> SessionTokenIssuer:
    """Issuer configured from settings, read once per process."""
    return SessionTokenIssuer(
        secret=settings.JWT_SECRET,
        lifetime=timedelta(seconds=settings.JWT_EXPIRES_IN_SECONDS),
    )
