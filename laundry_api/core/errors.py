"""Domain error taxonomy and its HTTP rendering.

Services raise these; the handlers registered in ``main`` turn them into
``{"error": ..., "code": ...}`` JSON bodies. Raw SQLAlchemy errors never
reach a client.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for all domain errors."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str, *, code: str | None = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code, **self.extra}


class ValidationError(AppError):
    """Missing or invalid required field."""

    status_code = 400
    code = "validation_error"


class DuplicateError(AppError):
    """Unique constraint violation on phone or email."""

    status_code = 409
    code = "duplicate"


class AuthError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "invalid_token"


class ForbiddenError(AppError):
    """Authenticated, but the role is not allowed."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    """Resource absent or not owned by the caller."""

    status_code = 404
    code = "not_found"


class InvalidStatusError(AppError):
    """Status value did not normalize to a canonical status."""

    status_code = 400
    code = "invalid_status"

    def __init__(self, allowed: list[str]):
        super().__init__(
            f"Status must be one of: {', '.join(allowed)}",
            allowed=allowed,
        )


class InvalidStatusTransitionError(AppError):
    """Backward status move while forward-only transitions are enforced."""

    status_code = 409
    code = "invalid_transition"


class StoreUnavailableError(AppError):
    """Backing store failed; the operation was not applied."""

    status_code = 503
    code = "store_unavailable"


# Auth reason codes
NO_TOKEN = "no_token"
INVALID_TOKEN = "invalid_token"
TOKEN_EXPIRED = "token_expired"
INVALID_CREDENTIALS = "invalid_credentials"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render body/query validation failures as 400 with the offending field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or None
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=400,
        content={"error": message, "code": ValidationError.code, "field": field},
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last line for store failures outside a service commit (e.g. a failed read)."""
    logger.exception("Unhandled store error on %s %s", request.method, request.url.path)
    error = StoreUnavailableError("Store unavailable")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
