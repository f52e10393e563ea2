"""Application configuration with environment variables."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change-this-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.1.0"
    PORT: int = 5000

    # Database
    DATABASE_URL: str = "sqlite+pysqlite:///./laundry.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_AUTO_MIGRATE: bool = False

    # Session Token
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_EXPIRES_DAYS: int = 7

    # Password hashing (argon2 cost)
    PASSWORD_HASH_TIME_COST: int = 3
    PASSWORD_HASH_MEMORY_COST: int = 65536

    # CORS (comma-separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"

    # Realtime admin channel
    WS_HEARTBEAT_TIMEOUT_SECONDS: float = 60.0

    # Orders
    ORDER_STATUS_FORWARD_ONLY: bool = False

    # Password reset codes
    OTP_LENGTH: int = 4
    OTP_TTL_MINUTES: int = 5

    # Rate Limiting (requests per minute)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_AUTH: int = 10
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    @model_validator(mode="after")
    def _require_real_secret(self) -> "Settings":
        if not self.is_dev and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set outside dev/test environments")
        return self

    @property
    def is_dev(self) -> bool:
        """Dev and test environments relax origin checks and expose reset codes."""
        return self.ENV in ("dev", "test")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
