"""
Constants for the SMS app.
"""

from enum import StrEnum


class SMSMode(StrEnum):
    """
    How OTPs are delivered and checked.

    LIVE calls Twilio Verify. TEST never contacts the provider: sends
    always succeed and any six-digit code is accepted.
    """

    LIVE = "live"
    TEST = "test"


class VerificationStatus(StrEnum):
    """Twilio Verify statuses this app cares about."""

    PENDING = "pending"
    APPROVED = "approved"
    CANCELED = "canceled"


OTP_LENGTH = 6
