"""Rate limiting configuration for the auth endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from laundry_api.core.config import settings


# memory:// is per-process; point RATE_LIMIT_STORAGE_URI at a shared
# backend when running several workers
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def auth_limit() -> str:
    return f"{settings.RATE_LIMIT_AUTH}/minute"
