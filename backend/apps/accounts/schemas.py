"""
Auth and member API schemas - Pydantic models for request/response.

Phone numbers and OTP codes are accepted as plain strings here; the
services normalize and validate them so the rules live in one place.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

# --- Shared ---


class ProfileFields(BaseModel):
    """
    Optional descriptive attributes of a member.

    Accepted in camelCase (mobile clients) or snake_case; responses are
    rendered in camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: EmailStr | None = None
    gender: str | None = Field(None, max_length=32)
    aadhaar: str | None = Field(None, max_length=20)
    father_name: str | None = Field(None, max_length=255)
    mother_name: str | None = Field(None, max_length=255)
    relationship_with_head: str | None = Field(None, max_length=64, examples=["Self"])
    gothra: str | None = Field(None, max_length=128)
    date_of_birth: date | None = Field(None, examples=["1990-01-01"])
    education: str | None = Field(None, max_length=255, examples=["Graduate"])
    upanayana: bool | None = None
    marital_status: str | None = Field(None, max_length=32, examples=["Married"])
    number_of_children: int | None = Field(None, ge=0, le=32767)
    occupation: str | None = Field(None, max_length=255, examples=["Self-Employed"])
    occupation_details: str | None = None
    annual_income: str | None = Field(None, max_length=64, examples=["5-10 Lakhs"])
    tax_payer: bool | None = None
    house_type: str | None = Field(None, max_length=64, examples=["Own"])
    residence_address: str | None = None
    family_house: str | None = Field(None, max_length=255)
    ration_card_type: str | None = Field(None, max_length=32, examples=["BPL"])
    special_person: bool | None = None
    profile_image: str | None = Field(None, max_length=500)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _date_part_of_timestamp(cls, value: object) -> object:
        """Clients may send an ISO timestamp (``1990-01-01T00:00:00.000Z``); keep the date."""
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


# --- Request Schemas ---


class SendOTPRequest(BaseModel):
    """Request to send an OTP to a phone number."""

    phone: str | None = Field(
        None,
        description="Indian mobile number, with or without +91",
        examples=["9876543210", "+919876543210"],
    )


class VerifyOTPRequest(BaseModel):
    """Request to verify an OTP."""

    phone: str | None = Field(None, description="Phone number the OTP was sent to", examples=["+919876543210"])
    otp: str | None = Field(None, description="Six-digit code received by SMS", examples=["123456"])


class RegisterRequest(ProfileFields):
    """Request to register a member after phone verification."""

    phone: str | None = Field(None, description="Verified phone number", examples=["+919876543210"])
    name: str | None = Field(None, max_length=255, examples=["Ravi Kumar"])


class ProfileUpdate(ProfileFields):
    """
    Validated subset of profile attributes for an update.

    Built from the request body after protected and unknown keys are removed.
    """

    name: str | None = Field(None, max_length=255)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# --- Response Schemas ---


class VerifyOTPResponse(BaseModel):
    """Response after OTP verification. No token until the member registers."""

    success: bool = True
    token: str | None = None
    is_new_user: bool = Field(..., serialization_alias="isNewUser")


class TokenResponse(BaseModel):
    """Response carrying a freshly issued session token."""

    success: bool = True
    token: str


class MemberProfile(ProfileFields):
    """Full member record."""

    id: int
    phone: str
    name: str
    email: str | None = None
    is_profile_complete: bool
    joined_date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MeResponse(BaseModel):
    """Current member response."""

    success: bool = True
    user: MemberProfile


class MemberSummary(BaseModel):
    """Member row in the directory listing."""

    id: int
    name: str
    phone: str
    email: str | None = None
    occupation: str | None = None
    residence_address: str | None = None
    date_of_birth: date | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MemberListResponse(BaseModel):
    """Member directory."""

    success: bool = True
    users: list[MemberSummary]
    total: int
