from __future__ import annotations

from datetime import date, datetime

import pytest

from step_challenge.database.bootstrap import apply_schema
from step_challenge.database.connection import SQLiteDatabase
from step_challenge.main import create_app, get_container

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "test-password"


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 3, 14)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 14, 9, 30, 0)


@pytest.fixture
def db(tmp_path):
    database = SQLiteDatabase(tmp_path / "steps.db")
    apply_schema(database)
    yield database
    database.close()


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    flask_app = create_app(
        {
            "SQLITE_PATH": str(tmp_path / "app.db"),
            "DEFAULT_ADMIN_EMAIL": ADMIN_EMAIL,
            "DEFAULT_ADMIN_PASSWORD": ADMIN_PASSWORD,
        }
    )
    yield flask_app
    get_container(flask_app).db.close()


@pytest.fixture
def container(app):
    return get_container(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client
