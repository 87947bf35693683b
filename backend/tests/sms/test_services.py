"""
Tests for the OTP verification gateway.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from twilio.base.exceptions import TwilioRestException

from apps.core.exceptions import ConfigurationError, UpstreamError
from apps.sms.constants import SMSMode, VerificationStatus
from apps.sms.services import VerificationGateway, get_verification_gateway

PHONE = "+919876543210"
SERVICE_SID = "VA00000000000000000000000000000000"


def twilio_error(code: int, status: int = 400, msg: str = "Twilio said no") -> TwilioRestException:
    return TwilioRestException(status, "https://verify.twilio.com/v2/Services", msg=msg, code=code)


@pytest.fixture
def twilio_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def verify_service(twilio_client: MagicMock) -> MagicMock:
    return twilio_client.verify.v2.services.return_value


@pytest.fixture
def live_gateway(twilio_client: MagicMock) -> VerificationGateway:
    return VerificationGateway(mode=SMSMode.LIVE, service_sid=SERVICE_SID, client_factory=lambda: twilio_client)


class TestTestMode:
    """SMS test mode never touches the provider."""

    def test_send_is_pending(self) -> None:
        factory = MagicMock()
        gateway = VerificationGateway(mode=SMSMode.TEST, client_factory=factory)

        result = gateway.send_code(PHONE)

        assert result.is_pending
        factory.assert_not_called()

    def test_any_six_digit_code_is_approved(self) -> None:
        gateway = VerificationGateway(mode=SMSMode.TEST)

        assert gateway.check_code(PHONE, "123456").is_approved

    @pytest.mark.parametrize("code", ["12345", "12a456", "1234567", ""])
    def test_malformed_code_is_not_approved(self, code: str) -> None:
        gateway = VerificationGateway(mode=SMSMode.TEST)

        result = gateway.check_code(PHONE, code)

        assert not result.is_approved
        assert not result.valid


class TestLiveSend:
    """Tests for send_code against a mocked Twilio client."""

    def test_creates_sms_verification(
        self, live_gateway: VerificationGateway, twilio_client: MagicMock, verify_service: MagicMock
    ) -> None:
        verify_service.verifications.create.return_value = SimpleNamespace(status="pending", valid=False)

        result = live_gateway.send_code(PHONE)

        twilio_client.verify.v2.services.assert_called_once_with(SERVICE_SID)
        verify_service.verifications.create.assert_called_once_with(to=PHONE, channel="sms")
        assert result.is_pending

    def test_known_error_code_is_translated(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verifications.create.side_effect = twilio_error(60203)

        with pytest.raises(UpstreamError) as exc_info:
            live_gateway.send_code(PHONE)

        assert exc_info.value.message == "Max send attempts reached. Try again later."
        assert exc_info.value.code == 60203
        assert exc_info.value.status_code == 400

    def test_unknown_error_code_uses_provider_message(
        self, live_gateway: VerificationGateway, verify_service: MagicMock
    ) -> None:
        verify_service.verifications.create.side_effect = twilio_error(99999, msg="Carrier unavailable")

        with pytest.raises(UpstreamError, match="Carrier unavailable"):
            live_gateway.send_code(PHONE)

    def test_timeout_is_upstream_error(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verifications.create.side_effect = requests.Timeout("read timed out")

        with pytest.raises(UpstreamError, match="Failed to send OTP"):
            live_gateway.send_code(PHONE)

    def test_missing_service_sid(self, twilio_client: MagicMock) -> None:
        gateway = VerificationGateway(mode=SMSMode.LIVE, service_sid="", client_factory=lambda: twilio_client)

        with pytest.raises(ConfigurationError, match="SMS service not configured"):
            gateway.send_code(PHONE)

        twilio_client.verify.v2.services.assert_not_called()

    def test_missing_credentials_propagate(self) -> None:
        def unconfigured():
            raise ConfigurationError("SMS service not configured")

        gateway = VerificationGateway(mode=SMSMode.LIVE, service_sid=SERVICE_SID, client_factory=unconfigured)

        with pytest.raises(ConfigurationError) as exc_info:
            gateway.send_code(PHONE)

        assert exc_info.value.status_code == 500


class TestLiveCheck:
    """Tests for check_code against a mocked Twilio client."""

    def test_approved(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verification_checks.create.return_value = SimpleNamespace(status="approved")

        result = live_gateway.check_code(PHONE, "123456")

        verify_service.verification_checks.create.assert_called_once_with(to=PHONE, code="123456")
        assert result.is_approved
        assert result.status == VerificationStatus.APPROVED

    def test_wrong_code_is_pending_not_error(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verification_checks.create.return_value = SimpleNamespace(status="pending")

        result = live_gateway.check_code(PHONE, "000000")

        assert not result.is_approved
        assert not result.valid

    def test_expired_verification(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verification_checks.create.side_effect = twilio_error(20404, status=404)

        with pytest.raises(UpstreamError, match="Twilio Verify service not found."):
            live_gateway.check_code(PHONE, "123456")

    def test_connection_error(self, live_gateway: VerificationGateway, verify_service: MagicMock) -> None:
        verify_service.verification_checks.create.side_effect = requests.ConnectionError("refused")

        with pytest.raises(UpstreamError, match="Failed to verify OTP"):
            live_gateway.check_code(PHONE, "123456")


class TestGetVerificationGateway:
    def test_uses_sms_mode_from_settings(self, settings) -> None:
        settings.SMS_MODE = SMSMode.LIVE
        settings.TWILIO_VERIFY_SERVICE_SID = SERVICE_SID

        gateway = get_verification_gateway()

        assert gateway.mode == SMSMode.LIVE
        assert gateway.service_sid == SERVICE_SID
