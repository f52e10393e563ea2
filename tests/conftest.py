"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- Customer/admin accounts and JWT minting
- HTTPX AsyncClient over ASGITransport, anonymous and authenticated
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time; configure before importing the app
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_AUTO_MIGRATE"] = "false"
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "1024"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from laundry_api.main import app
from laundry_api.core.deps import get_db
from laundry_api.core.security import create_session_token
from laundry_api.db.base import Base
from laundry_api.db.enums import UserRole
from laundry_api.db.models import User
from laundry_api.db.session import SessionLocal, engine
from laundry_api.services import user_service


CUSTOMER_PASSWORD = "wash-and-fold"
ADMIN_PASSWORD = "dispatch-123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Session over a freshly created schema, dropped after the test."""
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


def make_user(
    db: Session,
    *,
    name: str = "Test Customer",
    phone: str | None = None,
    password: str = CUSTOMER_PASSWORD,
    email: str | None = None,
    role: UserRole = UserRole.CUSTOMER,
) -> User:
    phone = phone or f"9{uuid.uuid4().int % 10**9:09d}"
    return user_service.create_user(
        db, name=name, phone=phone, password=password, email=email, role=role
    )


@pytest.fixture(scope="function")
def customer(db: Session) -> User:
    return make_user(db, name="Asha", phone="98765 43210", email="asha@example.com")


@pytest.fixture(scope="function")
def admin_user(db: Session) -> User:
    return make_user(
        db,
        name="Dispatch",
        phone="91234 56789",
        password=ADMIN_PASSWORD,
        role=UserRole.ADMIN,
    )


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(scope="function")
def customer_auth(customer: User) -> TestAuth:
    return TestAuth(user=customer, token=create_session_token(customer))


@pytest.fixture(scope="function")
def admin_auth(admin_user: User) -> TestAuth:
    return TestAuth(user=admin_user, token=create_session_token(admin_user))


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    customer_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient carrying a customer bearer token."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=customer_auth.headers,
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def admin_client(
    db: Session,
    admin_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient carrying an admin bearer token."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=admin_auth.headers,
    ) as c:
        yield c

    app.dependency_overrides.clear()
