"""Order numbers stay unique under concurrent creation."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import sessionmaker

from laundry_api.core.config import Settings
from laundry_api.db.base import Base
from laundry_api.db.session import create_engine_with_settings
from laundry_api.schemas.order import OrderCreate
from laundry_api.services import order_service, sequence_service, user_service


WORKERS = 8
ORDERS = 40


@pytest.fixture
def file_sessionmaker(tmp_path):
    """Separate connections per thread need a file-backed database."""
    config = Settings(ENV="test", DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / 'seq.db'}")
    engine = create_engine_with_settings(config)
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def test_first_value_is_one_and_counters_are_independent(db):
    assert sequence_service.next_value(db, "orderNumber") == 1
    assert sequence_service.next_value(db, "orderNumber") == 2
    assert sequence_service.next_value(db, "ticketNumber") == 1
    db.commit()


def test_uncommitted_increment_is_rolled_back(db):
    sequence_service.next_value(db, "orderNumber")
    db.rollback()

    assert sequence_service.next_value(db, "orderNumber") == 1


def test_concurrent_order_creation_yields_distinct_numbers(file_sessionmaker):
    with file_sessionmaker() as session:
        owner = user_service.create_user(
            session, name="Bulk", phone="9000000001", password="pw"
        )
        owner_id = owner.id

    def place(_):
        with file_sessionmaker() as session:
            order = order_service.create_order(
                session, owner_id, OrderCreate(service="Iron", pickup_address="Depot")
            )
            return order.order_number

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        numbers = list(pool.map(place, range(ORDERS)))

    assert len(set(numbers)) == ORDERS
    assert sorted(numbers) == list(range(1, ORDERS + 1))
