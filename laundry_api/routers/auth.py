"""Authentication router: signup, login, profile and password reset."""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from laundry_api.core.config import settings
from laundry_api.core.deps import get_current_claims, get_db
from laundry_api.core.errors import (
    INVALID_CREDENTIALS,
    AuthError,
    NotFoundError,
    ValidationError,
)
from laundry_api.core.rate_limit import auth_limit, limiter
from laundry_api.core.security import create_session_token
from laundry_api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    OtpRequest,
    OtpResponse,
    PasswordResetRequest,
    SignupRequest,
    TokenClaims,
)
from laundry_api.schemas.common import MessageResponse
from laundry_api.schemas.user import UserRead
from laundry_api.services import password_reset_service, user_service


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _auth_response(user) -> AuthResponse:
    return AuthResponse(token=create_session_token(user), user=UserRead.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_limit)
def signup(request: Request, body: SignupRequest, db: Session = Depends(get_db)):
    """Create a customer account and sign it in."""
    user = user_service.create_user(
        db,
        name=body.name,
        phone=body.phone,
        password=body.password,
        email=body.email,
    )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_limit)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)):
    """
    Sign in with email or phone plus password.

    Unknown identifier and wrong password give the same 401 so accounts
    cannot be enumerated.
    """
    identifier = body.resolved_identifier
    if not identifier or not body.password:
        raise ValidationError("Identifier and password are required.")

    user = user_service.find_by_identifier(db, identifier)
    if not user or not user_service.verify_password(user, body.password):
        raise AuthError("Invalid credentials", code=INVALID_CREDENTIALS)

    logger.info("User signed in", extra={"user_id": str(user.id)})
    return _auth_response(user)


@router.get("/profile", response_model=UserRead)
def profile(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    user = user_service.get_user(db, claims.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


# =============================================================================
# Password reset
# =============================================================================

@router.post("/auth/forgot-password/request-otp", response_model=OtpResponse)
@limiter.limit(auth_limit)
def request_otp(request: Request, body: OtpRequest, db: Session = Depends(get_db)):
    """
    Issue a one-time reset code for a phone number.

    The response is identical whether or not the phone is registered. The
    code itself is only echoed back in dev/test.
    """
    issued = password_reset_service.request_code(db, body.phone)
    response = OtpResponse(
        message=password_reset_service.GENERIC_ISSUED_MESSAGE,
        ttl_seconds=issued.ttl_seconds,
    )
    if settings.is_dev and issued.code:
        response.otp = issued.code
    return response


@router.post("/auth/forgot-password/reset", response_model=MessageResponse)
@limiter.limit(auth_limit)
def reset_password(request: Request, body: PasswordResetRequest, db: Session = Depends(get_db)):
    password_reset_service.reset_password(
        db,
        phone=body.phone,
        code=body.otp,
        new_password=body.resolved_password,
    )
    return MessageResponse(message="Password updated successfully")
