"""
OTP delivery and verification through Twilio Verify.

Twilio generates, stores and expires the codes; this module only asks it to
send one and later to check what the user typed.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import requests
from django.conf import settings
from twilio.base.exceptions import TwilioRestException

from apps.core.exceptions import ConfigurationError, UpstreamError
from apps.core.logging import get_logger
from apps.sms.constants import OTP_LENGTH, SMSMode, VerificationStatus
from apps.sms.twilio_client import SMS_NOT_CONFIGURED, describe_twilio_error, get_twilio_client

logger = get_logger(__name__)

OTP_CODE_RE = re.compile(rf"^\d{{{OTP_LENGTH}}}$")


@dataclass(frozen=True)
class VerificationResult:
    """Provider-independent outcome of a send or check call."""

    status: str
    valid: bool

    @property
    def is_pending(self) -> bool:
        return self.status == VerificationStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.valid and self.status == VerificationStatus.APPROVED


class VerificationGateway:
    """
    Sends and checks OTPs.

    Args:
        mode: LIVE calls Twilio, TEST simulates success locally.
        service_sid: Twilio Verify service SID (required in LIVE mode).
        client_factory: Returns a Twilio client. Injectable for tests.
    """

    def __init__(
        self,
        mode: SMSMode,
        service_sid: str = "",
        client_factory: Callable[[], Any] = get_twilio_client,
    ) -> None:
        self.mode = SMSMode(mode)
        self.service_sid = service_sid
        self._client_factory = client_factory

    def _verify_service(self) -> Any:
        if not self.service_sid:
            logger.error("twilio_verify_service_sid_missing")
            raise ConfigurationError(SMS_NOT_CONFIGURED)
        return self._client_factory().verify.v2.services(self.service_sid)

    def send_code(self, phone: str) -> VerificationResult:
        """
        Ask the provider to text a code to ``phone``.

        Raises:
            ConfigurationError: Provider credentials or service SID missing.
            UpstreamError: The provider rejected the request or was unreachable.
        """
        if self.mode == SMSMode.TEST:
            logger.info("otp_send_simulated", phone=phone)
            return VerificationResult(status=VerificationStatus.PENDING, valid=True)

        service = self._verify_service()
        try:
            verification = service.verifications.create(to=phone, channel="sms")
        except TwilioRestException as e:
            logger.warning("otp_send_rejected", phone=phone, code=e.code, status=e.status)
            raise UpstreamError(describe_twilio_error(e), code=e.code) from e
        except requests.RequestException as e:
            logger.error("otp_send_unreachable", phone=phone, error=str(e))
            raise UpstreamError("Failed to send OTP. Please try again.") from e

        logger.info("otp_send_requested", phone=phone, status=verification.status)
        return VerificationResult(
            status=verification.status,
            valid=bool(verification.valid),
        )

    def check_code(self, phone: str, code: str) -> VerificationResult:
        """
        Check a code the user entered.

        A wrong code is not an error: the result is simply not approved.

        Raises:
            ConfigurationError: Provider credentials or service SID missing.
            UpstreamError: The provider rejected the request or was unreachable.
        """
        if self.mode == SMSMode.TEST:
            if OTP_CODE_RE.match(code):
                logger.info("otp_check_simulated", phone=phone)
                return VerificationResult(status=VerificationStatus.APPROVED, valid=True)
            return VerificationResult(status=VerificationStatus.PENDING, valid=False)

        service = self._verify_service()
        try:
            check = service.verification_checks.create(to=phone, code=code)
        except TwilioRestException as e:
            logger.warning("otp_check_rejected", phone=phone, code=e.code, status=e.status)
            raise UpstreamError(describe_twilio_error(e), code=e.code) from e
        except requests.RequestException as e:
            logger.error("otp_check_unreachable", phone=phone, error=str(e))
            raise UpstreamError("Failed to verify OTP. Please try again.") from e

        logger.info("otp_check_completed", phone=phone, status=check.status)
        return VerificationResult(
            status=check.status,
            valid=check.status == VerificationStatus.APPROVED,
        )


@lru_cache(maxsize=1)
def get_verification_gateway() -> VerificationGateway:
    """Gateway configured from settings, shared by the process."""
    return VerificationGateway(
        mode=SMSMode(settings.SMS_MODE),
        service_sid=settings.TWILIO_VERIFY_SERVICE_SID,
    )
