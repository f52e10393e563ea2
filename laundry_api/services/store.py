"""Commit helper that keeps raw SQLAlchemy errors inside the service layer."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from laundry_api.core.errors import StoreUnavailableError


logger = logging.getLogger(__name__)


def commit_or_raise(db: Session, failure_message: str) -> None:
    """
    Commit the session's pending work.

    Raises:
        StoreUnavailableError: the commit failed; the session is rolled back
            and nothing from this unit of work was applied.
    """
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Commit failed: %s", failure_message)
        raise StoreUnavailableError(failure_message) from exc
