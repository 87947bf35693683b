"""
Tests for phone number normalization and validation.
"""

import pytest

from apps.core.exceptions import InvalidInputError
from apps.core.phone import mask_phone, normalize_phone, phone_digits, validate_phone


class TestNormalizePhone:
    """Tests for normalize_phone."""

    @pytest.mark.parametrize(
        "raw",
        ["9876543210", "919876543210", "+919876543210", "+91 98765-43210", "(+91) 98765 43210"],
    )
    def test_variants_normalize_to_e164(self, raw: str) -> None:
        assert normalize_phone(raw) == "+919876543210"

    def test_idempotent(self) -> None:
        once = normalize_phone("98765 43210")
        assert normalize_phone(once) == once

    def test_unrecognized_length_left_for_validation(self) -> None:
        assert normalize_phone("12345") == "12345"


class TestValidatePhone:
    """Tests for validate_phone."""

    def test_returns_normalized(self) -> None:
        assert validate_phone("9876543210") == "+919876543210"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing(self, raw: str | None) -> None:
        with pytest.raises(InvalidInputError, match="Phone number is required"):
            validate_phone(raw)

    @pytest.mark.parametrize("raw", ["5876543210", "+915876543210", "98765", "+14155550123", "98765432101"])
    def test_rejects_non_indian_mobile(self, raw: str) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_phone(raw)

        assert exc_info.value.status_code == 400
        assert "Invalid Indian phone number" in exc_info.value.message


class TestHelpers:
    """Tests for phone_digits and mask_phone."""

    def test_phone_digits(self) -> None:
        assert phone_digits("+91 98765-43210") == "919876543210"

    def test_mask_phone(self) -> None:
        assert mask_phone("+919876543210") == "+91987****10"

    def test_mask_short_value(self) -> None:
        assert mask_phone("12345") == "****"
