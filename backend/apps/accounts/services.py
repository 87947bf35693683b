"""
Phone authentication and member profile services.

PhoneAuthService runs the three unauthenticated flows (send code, verify
code, register). The profile helpers below it serve the authenticated
endpoints and take the member id from verified session claims.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from django.conf import settings
from django.db import IntegrityError, transaction
from pydantic import ValidationError

from apps.accounts.constants import (
    MUTABLE_PROFILE_FIELDS,
    NAME_MIN_LENGTH,
    PROTECTED_PROFILE_FIELDS,
)
from apps.accounts.models import Member
from apps.accounts.schemas import ProfileUpdate
from apps.accounts.tokens import SessionTokenIssuer, get_token_issuer
from apps.core.exceptions import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    RateLimitedError,
    UpstreamError,
)
from apps.core.logging import get_logger
from apps.core.phone import phone_digits, validate_phone
from apps.core.throttling import RateLimiter
from apps.sms.constants import OTP_LENGTH
from apps.sms.services import VerificationGateway, get_verification_gateway

logger = get_logger(__name__)

OTP_RE = re.compile(rf"^\d{{{OTP_LENGTH}}}$")

# camelCase alias -> field name, for bodies validated outside ninja
PROFILE_FIELD_ALIASES: dict[str, str] = {
    field.alias: name for name, field in ProfileUpdate.model_fields.items() if field.alias and field.alias != name
}


@dataclass
class VerifyCodeResult:
    """Outcome of an approved OTP check."""

    is_new_user: bool
    token: str | None = None
    member: Member | None = None


@dataclass
class RegistrationResult:
    """A newly created member and their first session token."""

    member: Member
    token: str


class UpstreamSendFailedError(UpstreamError):
    """Provider accepted the request but did not start a verification."""

    status_code = 500
    default_message = "Failed to send OTP. Please try again."


def validate_otp(code: str | None) -> str:
    """
    Check an OTP is exactly six digits.

    Raises:
        InvalidInputError: With a message naming the broken rule.
    """
    if code is None or not code.strip():
        raise InvalidInputError("OTP is required")
    code = code.strip()
    if len(code) != OTP_LENGTH:
        raise InvalidInputError(f"OTP must be {OTP_LENGTH} digits")
    if not OTP_RE.match(code):
        raise InvalidInputError("OTP must contain only digits")
    return code


def validate_name(name: str | None) -> str:
    """Trim a member name and enforce the minimum length."""
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Name is required")
    if len(name) < NAME_MIN_LENGTH:
        raise InvalidInputError(f"Name must be at least {NAME_MIN_LENGTH} characters")
    return name


def find_member_by_phone(phone: str) -> Member | None:
    """Look up a member by normalized phone number."""
    return Member.objects.filter(phone=phone).first()


class PhoneAuthService:
    """
    OTP-gated sign-in and registration.

    Args:
        rate_limiter: Limits OTP sends per phone number.
        gateway: Sends and checks codes with the provider.
        tokens: Issues session tokens.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        gateway: VerificationGateway,
        tokens: SessionTokenIssuer,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.gateway = gateway
        self.tokens = tokens

    def send_code(self, phone: str | None) -> str:
        """
        Send an OTP to ``phone``.

        Returns:
            The normalized phone number the code was sent to.

        Raises:
            InvalidInputError: Phone missing or not an Indian mobile number.
            RateLimitedError: Too many sends for this number.
            UpstreamError: Provider rejected the send or returned an unexpected status.
            ConfigurationError: Provider not configured.
        """
        phone = validate_phone(phone)

        decision = self.rate_limiter.check(phone_digits(phone))
        if not decision.allowed:
            logger.warning("otp_rate_limited", phone=phone, retry_after=decision.retry_after)
            if decision.just_blocked:
                message = "Too many OTP requests. Please try again in 5 minutes."
            else:
                message = f"Too many requests. Please try again in {decision.retry_after} seconds."
            raise RateLimitedError(message, retry_after=decision.retry_after)

        result = self.gateway.send_code(phone)
        if not result.is_pending:
            logger.error("otp_send_unexpected_status", phone=phone, status=result.status)
            raise UpstreamSendFailedError()

        logger.info("otp_sent", phone=phone)
        return phone

    def verify_code(self, phone: str | None, code: str | None) -> VerifyCodeResult:
        """
        Check an OTP and sign in an existing member.

        A verified phone with no member gets ``is_new_user=True`` and no
        token; nothing is stored, so the client must register right away.

        Raises:
            InvalidInputError: Bad phone/code format, or the code was not approved.
            UpstreamError: Provider rejected the check.
            ConfigurationError: Provider not configured.
        """
        phone = validate_phone(phone)
        code = validate_otp(code)

        result = self.gateway.check_code(phone, code)
        if not result.is_approved:
            logger.info("otp_rejected", phone=phone, status=result.status)
            raise InvalidInputError("Invalid OTP. Please try again.")

        member = find_member_by_phone(phone)
        if member is None:
            logger.info("otp_verified_new_member", phone=phone)
            return VerifyCodeResult(is_new_user=True)

        logger.info("otp_verified_existing_member", member_id=member.pk)
        return VerifyCodeResult(
            is_new_user=False,
            token=self.tokens.issue(member.pk, member.phone),
            member=member,
        )

    def register(self, phone: str | None, name: str | None, profile: dict[str, Any]) -> RegistrationResult:
        """
        Create a member and issue their first token.

        Args:
            phone: Phone number (normalized here).
            name: Display name, at least two characters after trimming.
            profile: Optional profile attributes; keys outside the mutable
                profile fields are ignored.

        Raises:
            InvalidInputError: Invalid phone or name.
            AlreadyExistsError: A member with this phone already exists.
        """
        phone = validate_phone(phone)
        name = validate_name(name)

        if find_member_by_phone(phone) is not None:
            raise AlreadyExistsError()

        attributes = {
            key: value
            for key, value in profile.items()
            if key in MUTABLE_PROFILE_FIELDS and key != "name"
        }
        if attributes.get("email"):
            attributes["email"] = attributes["email"].strip().lower()

        try:
            with transaction.atomic():
                member = Member.objects.create(
                    phone=phone,
                    name=name,
                    is_profile_complete=True,
                    **attributes,
                )
        except IntegrityError:
            logger.info("member_register_conflict", phone=phone)
            raise AlreadyExistsError() from None

        logger.info("member_registered", member_id=member.pk, phone=phone)
        return RegistrationResult(member=member, token=self.tokens.issue(member.pk, phone))


@lru_cache(maxsize=1)
def get_otp_rate_limiter() -> RateLimiter:
    """Process-wide OTP send limiter."""
    return RateLimiter(
        max_attempts=settings.OTP_RATE_LIMIT_MAX_ATTEMPTS,
        window_seconds=settings.OTP_RATE_LIMIT_WINDOW_SECONDS,
        block_seconds=settings.OTP_RATE_LIMIT_BLOCK_SECONDS,
    )


@lru_cache(maxsize=1)
def get_phone_auth_service() -> PhoneAuthService:
    """PhoneAuthService wired to the process-wide limiter, gateway and issuer."""
    return PhoneAuthService(
        rate_limiter=get_otp_rate_limiter(),
        gateway=get_verification_gateway(),
        tokens=get_token_issuer(),
    )


# --- Profiles ---


def get_member(member_id: str | int) -> Member:
    """
    Fetch a member by id.

    Raises:
        NotFoundError: No such member, or the id is not numeric.
    """
    try:
        return Member.objects.get(pk=int(member_id))
    except (Member.DoesNotExist, ValueError, TypeError):
        raise NotFoundError() from None


def sanitize_profile_update(data: dict[str, Any]) -> dict[str, Any]:
    """
    Keep only keys a member may change.

    camelCase keys are mapped to field names. Protected keys (phone, ids,
    timestamps) and unknown keys are dropped without error.
    """
    data = {PROFILE_FIELD_ALIASES.get(key, key): value for key, value in data.items()}

    protected = PROTECTED_PROFILE_FIELDS.intersection(data)
    if protected:
        logger.info("profile_update_protected_fields_ignored", fields=sorted(protected))

    unknown = set(data) - MUTABLE_PROFILE_FIELDS - PROTECTED_PROFILE_FIELDS
    if unknown:
        logger.info("profile_update_unknown_fields_ignored", fields=sorted(unknown))

    return {key: value for key, value in data.items() if key in MUTABLE_PROFILE_FIELDS}


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for err in error.errors(include_url=False):
        field = ".".join(str(part) for part in err["loc"])
        messages.append(f"{field}: {err['msg']}")
    return "Validation error: " + ", ".join(messages)


def update_member_profile(member_id: str | int, data: dict[str, Any]) -> Member:
    """
    Apply a partial profile update.

    Raises:
        InvalidInputError: Nothing left to update, or a field fails validation.
        NotFoundError: The member does not exist.
    """
    changes = sanitize_profile_update(data)
    if not changes:
        raise InvalidInputError("No fields to update")

    try:
        validated = ProfileUpdate.model_validate(changes)
    except ValidationError as e:
        raise InvalidInputError(_format_validation_error(e)) from None

    update_fields = validated.model_dump(include=set(changes))
    if "name" in update_fields:
        update_fields["name"] = validate_name(update_fields["name"])
    if update_fields.get("email"):
        update_fields["email"] = update_fields["email"].strip().lower()

    member = get_member(member_id)
    for field, value in update_fields.items():
        setattr(member, field, value)
    member.save(update_fields=[*update_fields, "updated_at"])

    logger.info("member_profile_updated", member_id=member.pk, fields=sorted(update_fields))
    return member


def list_members() -> list[Member]:
    """All members, alphabetically by name."""
    members = list(
        Member.objects.only(
            "id",
            "name",
            "phone",
            "email",
            "occupation",
            "residence_address",
            "date_of_birth",
        ).order_by("name")
    )
    logger.info("members_listed", count=len(members))
    return members
