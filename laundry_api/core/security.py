"""Security utilities for JWT session tokens."""

from datetime import datetime, timedelta, timezone

import jwt

from laundry_api.core.config import settings
from laundry_api.core.errors import INVALID_TOKEN, TOKEN_EXPIRED, AuthError
from laundry_api.schemas.auth import TokenClaims


ALGORITHM = "HS256"


# =============================================================================
# Session Token (JWT bearer)
# =============================================================================

def create_session_token(user, *, expires_in: timedelta | None = None) -> str:
    """
    Create signed session JWT for a user.

    Token carries identity (sub), display name and role. Validity depends only
    on the signature and ``exp``; there is no server-side revocation list, so
    rotating JWT_SECRET is the only way to invalidate outstanding tokens.
    """
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(days=settings.JWT_EXPIRES_DAYS)
    role = user.role.value if hasattr(user.role, "value") else str(user.role)
    payload = {
        "sub": str(user.id),
        "name": user.name,
        "role": role,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> TokenClaims:
    """
    Decode and verify session JWT.

    Raises:
        AuthError: code ``token_expired`` when the signature is valid but
            ``exp`` has passed, ``invalid_token`` for anything else.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "role", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired", code=TOKEN_EXPIRED) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token", code=INVALID_TOKEN) from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValueError as exc:
        raise AuthError("Invalid token", code=INVALID_TOKEN) from exc
