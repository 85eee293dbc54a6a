import importlib
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config

ROOT_DIR = Path(__file__).resolve().parents[1]


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url

    import app.cashup.core.config as config
    import app.cashup.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    return main.create_app(), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config(str(ROOT_DIR / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "test.db"
    database_url = f"sqlite+pysqlite:///{db_path}"
    monkeypatch.setenv("DATABASE_URL", database_url)

    _run_migrations(database_url)
    app, session = _setup_app(database_url)

    with TestClient(app) as client:
        yield client

    session.engine.dispose()


@pytest.fixture()
def db_session(client):
    from app.cashup.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_record():
    def _make(
        record_id: str = "1704099603842-000001-abcdef12",
        *,
        store: str = "store-1",
        time: str = "2024-01-01T09:00:03.842Z",
        entries: list[dict] | None = None,
    ) -> dict:
        if entries is None:
            entries = [{"id": "10", "count": 14, "float": 10, "borrow": 0, "returned": 0, "deposited": 4}]
        return {
            "id": record_id,
            "created_at": "2024-01-01T09:00:03.842Z",
            "payload": {
                "operator": "sam",
                "store": store,
                "notes": "",
                "date": "2024-01-01",
                "time": time,
                "total": "140",
                "totals": {
                    "count_total": "140",
                    "ideal_float": "100",
                    "actual_float_total": "100",
                    "borrowed_total": "0",
                    "returned_total": "0",
                    "deposited_total": "40",
                    "float_balanced": True,
                },
                "denominations": entries,
            },
        }

    return _make
