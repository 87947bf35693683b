"""
Tests for session token issuing and verification.
"""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from apps.accounts.tokens import (
    SESSION_TOKEN_ALGORITHM,
    SessionTokenIssuer,
    TokenExpiredError,
    TokenInvalidError,
    get_token_issuer,
)
from apps.core.exceptions import AuthFailure, ConfigurationError
from tests.conftest import TEST_JWT_SECRET


class TestSessionTokenIssuer:
    def test_round_trip(self, token_issuer: SessionTokenIssuer) -> None:
        token = token_issuer.issue(17, "+919876543210")

        claims = token_issuer.verify(token)

        assert claims.subject_id == "17"
        assert claims.phone == "+919876543210"
        assert claims.expires_at - claims.issued_at == timedelta(days=7)

    def test_expired_is_distinguished_from_invalid(self, token_issuer: SessionTokenIssuer) -> None:
        token = token_issuer.issue(1, "+919876543210", now=datetime.now(UTC) - timedelta(days=7, seconds=5))

        with pytest.raises(TokenExpiredError) as exc_info:
            token_issuer.verify(token)

        assert exc_info.value.reason == AuthFailure.EXPIRED

    def test_tampered_token(self, token_issuer: SessionTokenIssuer) -> None:
        token = token_issuer.issue(1, "+919876543210")
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"

        with pytest.raises(TokenInvalidError) as exc_info:
            token_issuer.verify(tampered)

        assert exc_info.value.reason == AuthFailure.INVALID

    def test_garbage_token(self, token_issuer: SessionTokenIssuer) -> None:
        with pytest.raises(TokenInvalidError):
            token_issuer.verify("not-a-jwt")

    def test_missing_phone_claim(self, token_issuer: SessionTokenIssuer) -> None:
        now = int(datetime.now(UTC).timestamp())
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + 60}, TEST_JWT_SECRET, algorithm=SESSION_TOKEN_ALGORITHM
        )

        with pytest.raises(TokenInvalidError):
            token_issuer.verify(token)

    def test_missing_expiry_claim(self, token_issuer: SessionTokenIssuer) -> None:
        token = jwt.encode({"sub": "1", "phone": "+919876543210", "iat": 0}, TEST_JWT_SECRET, algorithm="HS256")

        with pytest.raises(TokenInvalidError):
            token_issuer.verify(token)

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SessionTokenIssuer(secret="", lifetime=timedelta(days=7))


def test_get_token_issuer_reads_settings(settings) -> None:
    settings.JWT_SECRET = "from-settings"
    settings.JWT_EXPIRES_IN_SECONDS = 3600

    issuer = get_token_issuer()

    assert issuer.lifetime == timedelta(hours=1)
    claims = SessionTokenIssuer("from-settings", timedelta(hours=1)).verify(issuer.issue(5, "+919876543210"))
    assert claims.subject_id == "5"
