"""
Phone number helpers for Indian mobile numbers.

Numbers are stored and sent to the provider in E.164 form (``+91`` followed
by ten digits starting with 6-9).
"""

import re

from apps.core.exceptions import InvalidInputError

COUNTRY_CODE = "+91"

INDIAN_MOBILE_RE = re.compile(r"^\+91[6-9]\d{9}$")


def normalize_phone(phone: str) -> str:
    """
    Normalize a phone number towards ``+91XXXXXXXXXX``.

    Strips everything except digits and ``+``, then adds the country code
    for bare ten-digit numbers and ``91``-prefixed twelve-digit numbers.
    Anything else is returned cleaned but otherwise untouched so that
    validation can reject it.
    """
    cleaned = re.sub(r"[^\d+]", "", phone)

    if cleaned.startswith(COUNTRY_CODE):
        return cleaned
    if cleaned.startswith("91") and len(cleaned) == 12:
        return f"+{cleaned}"
    if len(cleaned) == 10:
        return f"{COUNTRY_CODE}{cleaned}"
    return cleaned


def validate_phone(phone: str | None) -> str:
    """
    Normalize and validate a phone number.

    Returns:
        The normalized phone number.

    Raises:
        InvalidInputError: If the phone is missing or not an Indian mobile number.
    """
    if phone is None or not phone.strip():
        raise InvalidInputError("Phone number is required")

    normalized = normalize_phone(phone.strip())
    if not INDIAN_MOBILE_RE.match(normalized):
        raise InvalidInputError(
            "Invalid Indian phone number. Must start with 6-9 and be 10 digits."
        )
    return normalized


def phone_digits(phone: str) -> str:
    """Digits-only form, so formatting variants share one rate limit bucket."""
    return re.sub(r"\D", "", phone)


def mask_phone(phone: str) -> str:
    """Mask the middle of a phone number for logs (``+91987****10``)."""
    if len(phone) <= 8:
        return "****"
    return f"{phone[:6]}****{phone[-2:]}"
