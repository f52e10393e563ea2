"""Phone-based password reset with short-lived one-time codes.

Codes would normally go out by SMS. SMS delivery is not wired up, so outside
production the code is returned to the caller for in-app display.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from laundry_api.core.config import settings
from laundry_api.core.errors import (
    INVALID_CREDENTIALS,
    AuthError,
    NotFoundError,
    ValidationError,
)
from laundry_api.core.passwords import hash_password, verify_password
from laundry_api.db.models import PasswordResetCode
from laundry_api.services import user_service
from laundry_api.services.store import commit_or_raise
from laundry_api.utils.normalization import normalize_phone


logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 6
GENERIC_ISSUED_MESSAGE = "If account exists, code generated."


@dataclass(frozen=True)
class IssuedCode:
    """Outcome of a code request; ``code`` is None when nothing was issued."""

    code: str | None
    ttl_seconds: int


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def generate_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(max(1, length)))


def request_code(db: Session, phone: str | None) -> IssuedCode:
    """
    Issue a reset code for the account registered to ``phone``.

    Unknown phones get the same outward response as known ones.
    """
    ttl_seconds = settings.OTP_TTL_MINUTES * 60
    if not phone or not phone.strip():
        raise ValidationError("Phone is required", field="phone")

    normalized = normalize_phone(phone)
    if len(normalized) < MIN_PHONE_DIGITS:
        raise ValidationError("Invalid phone", field="phone")

    if not user_service.get_user_by_phone(db, normalized):
        return IssuedCode(code=None, ttl_seconds=ttl_seconds)

    code = generate_code(settings.OTP_LENGTH)
    record = db.get(PasswordResetCode, normalized)
    if record is None:
        record = PasswordResetCode(phone=normalized)
        db.add(record)
    record.code_hash = hash_password(code)
    record.expires_at = _now() + timedelta(seconds=ttl_seconds)
    record.created_at = _now()
    commit_or_raise(db, "Failed to issue reset code")

    logger.info("Password reset code issued")
    return IssuedCode(code=code, ttl_seconds=ttl_seconds)


def reset_password(
    db: Session,
    *,
    phone: str | None,
    code: str | None,
    new_password: str | None,
) -> None:
    """Consume a valid code and set the new password."""
    phone = (phone or "").strip()
    code = (code or "").strip()
    if not phone or not code or not new_password:
        raise ValidationError("phone, otp and newPassword are required")

    normalized = normalize_phone(phone)
    if not normalized:
        raise ValidationError("Invalid phone", field="phone")

    record = db.get(PasswordResetCode, normalized)
    if record is None:
        raise ValidationError("No OTP found or expired")

    if _as_aware(record.expires_at) <= _now():
        db.delete(record)
        commit_or_raise(db, "Failed to clear reset code")
        raise ValidationError("OTP expired")

    if not verify_password(code, record.code_hash):
        raise AuthError("Invalid OTP", code=INVALID_CREDENTIALS)

    user = user_service.get_user_by_phone(db, normalized)
    if not user:
        db.delete(record)
        commit_or_raise(db, "Failed to clear reset code")
        raise NotFoundError("User not found")

    db.delete(record)
    user_service.set_password(db, user, new_password)
    logger.info("Password reset completed", extra={"user_id": str(user.id)})
