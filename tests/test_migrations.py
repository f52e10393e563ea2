from sqlalchemy import inspect

from laundry_api.core.config import Settings, settings
from laundry_api.core.migrations import check_schema, schema_status
from laundry_api.db.session import create_engine_with_settings


def _file_engine(tmp_path, monkeypatch, name):
    url = f"sqlite+pysqlite:///{tmp_path / name}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)
    return create_engine_with_settings(Settings(ENV="test", DATABASE_URL=url))


def test_upgrade_builds_schema_to_head(tmp_path, monkeypatch):
    engine = _file_engine(tmp_path, monkeypatch, "migrated.db")

    assert not schema_status(engine).is_current

    status = check_schema(engine, upgrade=True)

    assert status.is_current
    assert status.current == status.head
    tables = set(inspect(engine).get_table_names())
    assert {"users", "orders", "order_status_changes", "tickets", "ticket_replies",
            "sequence_counters", "password_reset_codes"} <= tables
    engine.dispose()


def test_stale_schema_is_only_reported_without_upgrade(tmp_path, monkeypatch, caplog):
    engine = _file_engine(tmp_path, monkeypatch, "untouched.db")

    status = check_schema(engine, upgrade=False)

    assert not status.is_current
    assert status.current == frozenset()
    assert "users" not in inspect(engine).get_table_names()
    assert "behind head" in caplog.text
    engine.dispose()


def test_current_schema_is_left_alone(tmp_path, monkeypatch):
    engine = _file_engine(tmp_path, monkeypatch, "current.db")
    check_schema(engine, upgrade=True)

    status = check_schema(engine, upgrade=False)

    assert status.is_current
    engine.dispose()
