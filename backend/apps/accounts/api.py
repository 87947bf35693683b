"""
Auth and member API endpoints.

Handles phone OTP authentication flows:
- OTP send/verify
- Member registration
- Current member profile read/update
- Member directory
"""

import json
import logging

from django.http import HttpRequest
from ninja import Router

from apps.accounts.schemas import (
    MemberListResponse,
    MemberProfile,
    MemberSummary,
    MeResponse,
    RegisterRequest,
    SendOTPRequest,
    TokenResponse,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from apps.accounts.services import (
    get_member,
    get_phone_auth_service,
    list_members,
    update_member_profile,
)
from apps.core.exceptions import InvalidInputError
from apps.core.schemas import ErrorResponse, MessageResponse
from apps.core.security import BearerAuth
from apps.core.types import AuthenticatedHttpRequest

logger = logging.getLogger(__name__)

router = Router(tags=["auth"])
users_router = Router(tags=["users"])
bearer_auth = BearerAuth()


@router.post(
    "/send-otp",
    response={200: MessageResponse, 400: ErrorResponse, 429: ErrorResponse, 500: ErrorResponse},
    operation_id="sendOtp",
    summary="Send OTP to phone number",
)
def send_otp(request: HttpRequest, payload: SendOTPRequest) -> MessageResponse:
    """
    Send a six-digit OTP by SMS.

    Limited to three sends per number per minute; the fourth blocks the
    number for five minutes.
    """
    get_phone_auth_service().send_code(payload.phone)
    return MessageResponse(message="OTP sent successfully")


@router.post(
    "/verify-otp",
    response={200: VerifyOTPResponse, 400: ErrorResponse},
    by_alias=True,
    exclude_none=True,
    operation_id="verifyOtp",
    summary="Verify OTP",
)
def verify_otp(request: HttpRequest, payload: VerifyOTPRequest) -> VerifyOTPResponse:
    """
    Verify an OTP.

    Existing members receive a session token. New numbers get
    ``isNewUser: true`` and must call register-user next.
    """
    result = get_phone_auth_service().verify_code(payload.phone, payload.otp)
    return VerifyOTPResponse(token=result.token, is_new_user=result.is_new_user)


@router.post(
    "/register-user",
    response={201: TokenResponse, 400: ErrorResponse},
    operation_id="registerUser",
    summary="Register a new member",
)
def register_user(request: HttpRequest, payload: RegisterRequest) -> tuple[int, TokenResponse]:
    """Create a member for a verified phone number and return a session token."""
    profile = payload.model_dump(exclude={"phone", "name"}, exclude_none=True)
    result = get_phone_auth_service().register(payload.phone, payload.name, profile)
    return 201, TokenResponse(token=result.token)


@router.get(
    "/me",
    response={200: MeResponse, 401: ErrorResponse, 404: ErrorResponse},
    by_alias=True,
    auth=bearer_auth,
    operation_id="getCurrentMember",
    summary="Get current member",
)
def get_current_member(request: AuthenticatedHttpRequest) -> MeResponse:
    """Get the member identified by the session token."""
    member = get_member(request.auth.subject_id)
    return MeResponse(user=MemberProfile.model_validate(member))


@router.put(
    "/update-profile",
    response={200: MeResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    by_alias=True,
    auth=bearer_auth,
    operation_id="updateProfile",
    summary="Update current member profile",
)
def update_profile(request: AuthenticatedHttpRequest) -> MeResponse:
    """
    Partially update the current member's profile.

    Keys may be camelCase or snake_case. Phone number, ids and timestamps
    cannot be changed; such keys and unknown keys in the body are ignored.
    """
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Malformed profile update body: %s", e)
        raise InvalidInputError("Request body must be valid JSON") from e
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")

    member = update_member_profile(request.auth.subject_id, data)
    return MeResponse(user=MemberProfile.model_validate(member))


@users_router.get(
    "",
    response={200: MemberListResponse, 401: ErrorResponse},
    by_alias=True,
    auth=bearer_auth,
    operation_id="listMembers",
    summary="List all members",
)
def list_all_members(request: AuthenticatedHttpRequest) -> MemberListResponse:
    """List every registered member, sorted by name."""
    members = [MemberSummary.model_validate(member) for member in list_members()]
    return MemberListResponse(users=members, total=len(members))
