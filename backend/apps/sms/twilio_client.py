"""
Twilio Verify client wrapper.

Builds the SDK client from settings and translates Twilio error codes into
messages that are safe to show to end users.
"""

import logging
from functools import lru_cache
from typing import Any

from django.conf import settings
from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from apps.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SMS_NOT_CONFIGURED = "SMS service not configured"

# https://www.twilio.com/docs/api/errors
TWILIO_ERROR_MESSAGES: dict[int, str] = {
    20003: "Authentication failed. Check Twilio credentials.",
    20404: "Twilio Verify service not found.",
    21211: "Invalid phone number format.",
    21408: "Phone number not verified for trial account.",
    21610: "SMS sending blocked for this number.",
    21614: "Invalid mobile number.",
    60200: "Invalid parameter.",
    60203: "Max send attempts reached. Try again later.",
    60212: "Too many requests. Please wait before retrying.",
    20429: "Invalid verification code.",
    60202: "Too many attempts. Please request a new code.",
}

GENERIC_PROVIDER_ERROR = "Failed to verify OTP"


def describe_twilio_error(error: TwilioRestException) -> str:
    """
    Map a Twilio error to a user-facing message.

    Falls back to Twilio's own message for unknown codes, and to a generic
    message when there is none.
    """
    code = error.code or error.status
    if code in TWILIO_ERROR_MESSAGES:
        return TWILIO_ERROR_MESSAGES[code]
    return error.msg or GENERIC_PROVIDER_ERROR


@lru_cache(maxsize=1)
def get_twilio_client() -> Any:
    """
    Get the Twilio REST client.

    Cached so the underlying HTTP session is reused.

    Raises:
        ConfigurationError: If TWILIO_ACCOUNT_SID or TWILIO_AUTH_TOKEN is missing.
    """
    account_sid = settings.TWILIO_ACCOUNT_SID
    auth_token = settings.TWILIO_AUTH_TOKEN

    if not account_sid or not auth_token:
        logger.error("Twilio credentials not configured")
        raise ConfigurationError(SMS_NOT_CONFIGURED)

    http_client = TwilioHttpClient(timeout=settings.TWILIO_TIMEOUT_SECONDS)
    return Client(account_sid, auth_token, http_client=http_client)
