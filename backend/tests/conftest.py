"""
Shared pytest fixtures for all tests.

This module provides common fixtures used across multiple test modules.
Individual test modules can override these fixtures if needed.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import MemberFactory

Example usage:

    @pytest.mark.django_db
    def test_something(auth_header):
        member = MemberFactory.create(name="Ravi Kumar")
        response = api_client.get("/api/auth/me", **auth_header(member))
"""

from collections.abc import Callable, Iterator
from datetime import timedelta
from typing import Any
from unittest.mock import patch

import pytest
from django.test import Client

from apps.accounts.services import (
    PhoneAuthService,
    get_otp_rate_limiter,
    get_phone_auth_service,
)
from apps.accounts.tokens import SessionTokenIssuer, get_token_issuer
from apps.core.throttling import RateLimiter
from apps.sms.constants import SMSMode
from apps.sms.services import VerificationGateway, get_verification_gateway

TEST_JWT_SECRET = "test-jwt-secret"


class FakeClock:
    """Manually advanced clock for time-dependent tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_cached_services() -> Iterator[None]:
    """Process-wide singletons are rebuilt for every test."""
    for getter in (get_phone_auth_service, get_otp_rate_limiter, get_verification_gateway, get_token_issuer):
        getter.cache_clear()
    yield
    for getter in (get_phone_auth_service, get_otp_rate_limiter, get_verification_gateway, get_token_issuer):
        getter.cache_clear()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_issuer() -> SessionTokenIssuer:
    return SessionTokenIssuer(secret=TEST_JWT_SECRET, lifetime=timedelta(days=7))


@pytest.fixture
def phone_auth_service(fake_clock: FakeClock, token_issuer: SessionTokenIssuer) -> Iterator[PhoneAuthService]:
    """
    PhoneAuthService in SMS test mode with a fake-clock rate limiter.

    Patched in for the API layer, so HTTP tests can move time forward
    with ``fake_clock.advance``.
    """
    service = PhoneAuthService(
        rate_limiter=RateLimiter(max_attempts=3, window_seconds=60, block_seconds=300, clock=fake_clock),
        gateway=VerificationGateway(mode=SMSMode.TEST),
        tokens=token_issuer,
    )
    with patch("apps.accounts.api.get_phone_auth_service", return_value=service):
        yield service


@pytest.fixture
def auth_header(token_issuer: SessionTokenIssuer) -> Callable[..., dict[str, Any]]:
    """
    Factory fixture returning test client kwargs with a bearer token.

    Example:
        response = api_client.get("/api/auth/me", **auth_header(member))
    """

    def _make(member: Any) -> dict[str, Any]:
        token = token_issuer.issue(member.pk, member.phone)
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    return _make
