"""Named sequence generator backed by the sequence_counters table."""

import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from laundry_api.core.errors import StoreUnavailableError
from laundry_api.db.models import SequenceCounter


logger = logging.getLogger(__name__)

ORDER_NUMBER_SEQUENCE = "orderNumber"

_UPSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def next_value(db: Session, name: str) -> int:
    """
    Atomically increment and return the named counter.

    Issued as a single ``INSERT ... ON CONFLICT DO UPDATE ... RETURNING``
    statement, so two callers can never observe the same value. The counter
    row is created on first use and the first value handed out is 1.

    Runs inside the caller's transaction: the increment is only durable once
    the caller commits.

    Raises:
        StoreUnavailableError: the increment could not be applied. Callers
            must not fall back to a locally computed number.
    """
    dialect = db.get_bind().dialect.name
    builder = _UPSERT_BUILDERS.get(dialect)
    if builder is None:
        raise StoreUnavailableError(f"Sequences are not supported on {dialect}")

    stmt = builder(SequenceCounter).values(name=name, value=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[SequenceCounter.name],
        set_={"value": SequenceCounter.value + 1},
    ).returning(SequenceCounter.value)

    try:
        return db.execute(stmt).scalar_one()
    except SQLAlchemyError as exc:
        logger.exception("Sequence increment failed", extra={"sequence": name})
        raise StoreUnavailableError("Could not allocate sequence number") from exc
