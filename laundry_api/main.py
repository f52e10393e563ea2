"""FastAPI application entry point."""
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from laundry_api.core.config import settings
from laundry_api.core.errors import (
    AppError,
    app_error_handler,
    request_validation_handler,
    store_error_handler,
)
from laundry_api.core.migrations import check_schema
from laundry_api.core.structured_logging import build_log_context
from laundry_api.db.session import engine

logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and not settings.is_dev:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # phones and addresses stay out of Sentry
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from laundry_api.core.rate_limit import limiter


@asynccontextmanager
async def lifespan(app: FastAPI):
    status = check_schema(engine, upgrade=settings.DB_AUTO_MIGRATE)
    logger.info("Database schema at %s", ",".join(sorted(status.current)) or "base")
    yield


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Laundry Pickup API",
    description="Pickup ordering, admin dispatch and support tickets",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(SQLAlchemyError, store_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Propagate X-Request-ID and log one line per request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    route = request.scope.get("route")
    claims = getattr(request.state, "claims", None)
    context = build_log_context(
        user_id=str(claims.user_id) if claims else None,
        role=claims.role.value if claims else None,
        request_id=request_id,
        route=getattr(route, "path", request.url.path),
        method=request.method,
    )
    context["status"] = response.status_code
    context["duration_ms"] = round((time.perf_counter() - started) * 1000, 1)
    logger.info("%s %s %s", request.method, context["route"], response.status_code, extra=context)

    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Routers
# ============================================================================

from laundry_api.routers import admin, auth, orders, tickets, websocket as ws_router

app.include_router(auth.router)
app.include_router(orders.router)
app.include_router(admin.router)
app.include_router(tickets.router)
app.include_router(ws_router.router)


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("laundry_api.main:app", host="0.0.0.0", port=settings.PORT)
