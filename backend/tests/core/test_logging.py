"""
Tests for structured logging configuration.
"""

import json
import logging

import structlog

from apps.core.logging import (
    _mask_phone_numbers,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_json_format(self):
        """Test that JSON format configuration works."""
        configure_logging(json_format=True, log_level="INFO")

        assert structlog.is_configured()
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_console_format(self):
        """Test that console format configuration works."""
        configure_logging(json_format=False, log_level="DEBUG")

        assert structlog.is_configured()
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(json_format=True, log_level="chatty")

        assert logging.getLogger().level == logging.INFO


class TestContextVars:
    """Tests for context variable binding."""

    def setup_method(self):
        clear_contextvars()

    def teardown_method(self):
        clear_contextvars()

    def test_bind_contextvars_adds_context(self):
        bind_contextvars(correlation_id="abc123", member_id="7")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("correlation_id") == "abc123"
        assert ctx.get("member_id") == "7"

    def test_clear_contextvars_removes_context(self):
        bind_contextvars(correlation_id="abc123")
        clear_contextvars()

        assert structlog.contextvars.get_contextvars() == {}


class TestPhoneMasking:
    """Tests for the phone masking processor."""

    def test_masks_phone_and_to_fields(self):
        event = _mask_phone_numbers(
            logging.getLogger(), "info", {"event": "otp_sent", "phone": "+919876543210", "to": "+919123456789"}
        )

        assert event["phone"] == "+91987****10"
        assert event["to"] == "+91912****89"

    def test_leaves_other_fields(self):
        event = _mask_phone_numbers(logging.getLogger(), "info", {"event": "x", "member_id": "+919876543210"})

        assert event["member_id"] == "+919876543210"

    def test_rendered_output_has_no_raw_phone(self, capsys):
        configure_logging(json_format=True, log_level="DEBUG")
        logger = get_logger("test.masking")

        logger.info("otp_sent", phone="+919876543210")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "otp_sent"
        assert payload["phone"] == "+91987****10"
        assert "9876543210" not in line
