"""Accounts app configuration."""

import atexit

from django.apps import AppConfig
from django.conf import settings


class AccountsConfig(AppConfig):
    """Configuration for accounts app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.accounts"
    verbose_name = "Members"

    def ready(self) -> None:
        if not settings.OTP_RATE_LIMIT_SWEEP_ENABLED:
            return

        from apps.accounts.services import get_otp_rate_limiter

        limiter = get_otp_rate_limiter()
        limiter.start_sweeper(interval_seconds=settings.OTP_RATE_LIMIT_SWEEP_INTERVAL_SECONDS)
        atexit.register(limiter.stop_sweeper)
