"""User schemas (the password hash is never serialized)."""

from datetime import datetime
from uuid import UUID

from laundry_api.db.enums import UserRole
from laundry_api.schemas.common import CamelModel


class UserRead(CamelModel):
    id: UUID
    name: str
    email: str | None = None
    phone: str
    role: UserRole
    created_at: datetime | None = None


class OwnerSummary(CamelModel):
    """Owner fields resolved onto admin order listings."""
    id: UUID
    name: str
    email: str | None = None
    phone: str


class RoleUpdateRequest(CamelModel):
    role: str | None = None
