"""Password and one-time code hashing (argon2 via passlib)."""

from passlib.context import CryptContext

from laundry_api.core.config import settings


pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=settings.PASSWORD_HASH_TIME_COST,
    argon2__memory_cost=settings.PASSWORD_HASH_MEMORY_COST,
)


def hash_password(plaintext: str) -> str:
    return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str | None) -> bool:
    """Constant-time check; a missing or malformed hash never verifies."""
    if not hashed:
        return False
    try:
        return pwd_context.verify(plaintext, hashed)
    except ValueError:
        return False
