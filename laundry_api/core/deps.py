"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from laundry_api.core.errors import NO_TOKEN, AuthError, ForbiddenError
from laundry_api.core.security import decode_session_token
from laundry_api.db.session import SessionLocal
from laundry_api.schemas.auth import TokenClaims


AUTH_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def extract_bearer_token(header_value: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` value."""
    if not header_value or not header_value.lower().startswith(BEARER_PREFIX):
        return None
    token = header_value[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_claims(request: Request) -> TokenClaims:
    """
    Validate the bearer token and attach its claims to the request.

    Raises:
        AuthError 401: ``no_token``, ``invalid_token`` or ``token_expired``
    """
    token = extract_bearer_token(request.headers.get(AUTH_HEADER))
    if not token:
        raise AuthError("No access token", code=NO_TOKEN)

    claims = decode_session_token(token)
    request.state.claims = claims
    return claims


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """
    Second guard layer for admin-only endpoints.

    A valid customer token is a 403, never a 401.
    """
    if not claims.is_admin:
        raise ForbiddenError("Admin only")
    return claims
