"""Schema revision checks and the optional upgrade run at startup."""

import logging
from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Engine

from laundry_api.core.config import settings


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class SchemaStatus:
    current: frozenset[str]
    head: frozenset[str]

    @property
    def is_current(self) -> bool:
        return self.current == self.head


class MigrationError(RuntimeError):
    """Raised when the schema is still behind head after an upgrade."""


def alembic_config() -> Config:
    """Alembic config for the project's own migrations, pointed at DATABASE_URL."""
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    config.attributes["configure_logger"] = False
    return config


def schema_status(engine: Engine) -> SchemaStatus:
    """Compare the revision stamped in the database with the newest revision on disk."""
    head = ScriptDirectory.from_config(alembic_config()).get_heads()
    with engine.connect() as connection:
        current = MigrationContext.configure(connection).get_current_heads()
    return SchemaStatus(current=frozenset(current), head=frozenset(head))


def check_schema(engine: Engine, *, upgrade: bool) -> SchemaStatus:
    """
    Startup schema check.

    With ``upgrade`` the database is brought to head; a single worker should
    own this (set DB_AUTO_MIGRATE on one process only). Without it a stale
    schema is only logged, so the API still starts and ``/health`` can report.
    """
    status = schema_status(engine)
    if status.is_current:
        return status

    if not upgrade:
        logger.warning(
            "Database schema is behind head; run `alembic upgrade head`",
            extra={"current": sorted(status.current), "head": sorted(status.head)},
        )
        return status

    logger.info("Upgrading database schema", extra={"head": sorted(status.head)})
    command.upgrade(alembic_config(), "head")
    status = schema_status(engine)
    if not status.is_current:
        raise MigrationError("Database schema did not reach head after upgrade.")
    return status
