"""Authentication-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from laundry_api.db.enums import UserRole
from laundry_api.schemas.common import CamelModel
from laundry_api.schemas.user import UserRead


class TokenClaims(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    name: str | None = None
    role: UserRole
    iat: datetime | None = None
    exp: datetime

    @property
    def user_id(self) -> UUID:
        return self.sub

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class SignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1)
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(CamelModel):
    """Accepts ``identifier`` or the legacy ``email``/``phone`` keys."""
    identifier: str | None = None
    email: str | None = None
    phone: str | None = None
    password: str | None = None

    @property
    def resolved_identifier(self) -> str:
        return (self.identifier or self.email or self.phone or "").strip()


class AuthResponse(BaseModel):
    token: str
    user: UserRead


class OtpRequest(CamelModel):
    phone: str | None = None


class OtpResponse(CamelModel):
    ok: bool = True
    message: str
    otp: str | None = None
    ttl_seconds: int | None = None


class PasswordResetRequest(CamelModel):
    phone: str | None = None
    otp: str | None = None
    new_password: str | None = None
    password: str | None = None

    @property
    def resolved_password(self) -> str:
        return self.new_password or self.password or ""
