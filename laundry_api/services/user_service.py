"""User accounts: signup, credential lookup, admin role management."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from laundry_api.core.errors import (
    DuplicateError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from laundry_api.core.passwords import hash_password, verify_password as _verify_hash
from laundry_api.db.enums import UserRole
from laundry_api.db.models import User
from laundry_api.services.store import commit_or_raise
from laundry_api.utils.normalization import (
    looks_like_email,
    normalize_email,
    normalize_phone,
)


logger = logging.getLogger(__name__)

PHONE_IN_USE = "Phone already in use."
EMAIL_IN_USE = "Email already in use."


def get_user(db: Session, user_id: UUID) -> User | None:
    return db.get(User, user_id)


def get_user_by_phone(db: Session, phone: str) -> User | None:
    normalized = normalize_phone(phone)
    if not normalized:
        return None
    return db.scalars(select(User).where(User.phone == normalized)).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.scalars(select(User).where(User.email == normalized)).first()


def find_by_identifier(db: Session, identifier: str) -> User | None:
    """Resolve a login identifier: e-mail shaped values match email, anything else phone."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    if looks_like_email(identifier):
        return get_user_by_email(db, identifier)
    return get_user_by_phone(db, identifier)


def verify_password(user: User, plaintext: str) -> bool:
    return _verify_hash(plaintext, user.password_hash)


def _raise_duplicate(db: Session, phone: str, email: str | None) -> None:
    if get_user_by_phone(db, phone):
        raise DuplicateError(PHONE_IN_USE, field="phone")
    if email and get_user_by_email(db, email):
        raise DuplicateError(EMAIL_IN_USE, field="email")


def create_user(
    db: Session,
    *,
    name: str,
    phone: str,
    password: str,
    email: str | None = None,
    role: UserRole = UserRole.CUSTOMER,
) -> User:
    """
    Create a user with a hashed password.

    Phone is normalized to digits before the uniqueness check, so
    "98765 43210" and "98765-43210" collide. A unique-constraint violation
    raised by a concurrent signup is translated into the same DuplicateError
    as the pre-check.
    """
    name = (name or "").strip()
    if not name or not phone or not password:
        raise ValidationError("Name, phone and password are required.")

    normalized_phone = normalize_phone(phone)
    if not normalized_phone:
        raise ValidationError("Phone must contain digits.", field="phone")
    normalized_email = normalize_email(email)

    _raise_duplicate(db, normalized_phone, normalized_email)

    user = User(
        name=name,
        phone=normalized_phone,
        email=normalized_email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        _raise_duplicate(db, normalized_phone, normalized_email)
        raise DuplicateError("Duplicate value error")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Signup failed on store error")
        raise StoreUnavailableError("Could not create account") from exc

    db.refresh(user)
    logger.info("User created", extra={"user_id": str(user.id), "role": user.role.value})
    return user


def set_password(db: Session, user: User, password: str) -> User:
    if not password:
        raise ValidationError("Password is required.", field="password")
    user.password_hash = hash_password(password)
    commit_or_raise(db, "Failed to update password")
    db.refresh(user)
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.created_at.desc())).all())


def set_role(db: Session, user_id: UUID, role: str | None) -> tuple[User, UserRole]:
    """
    Change a user's role.

    Returns the updated user and its previous role so callers can react to
    demotions.
    """
    if not role or not UserRole.has_value(role):
        allowed = ", ".join(f'"{r.value}"' for r in UserRole)
        raise ValidationError(f"Role must be one of: {allowed}", field="role")

    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    previous = user.role
    user.role = UserRole(role)
    commit_or_raise(db, "Failed to update role")
    db.refresh(user)
    logger.info(
        "User role changed",
        extra={"user_id": str(user.id), "from_role": previous.value, "to_role": user.role.value},
    )
    return user, previous
