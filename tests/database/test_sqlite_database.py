from __future__ import annotations

import pytest

from step_challenge.core.enums import Dialect, StorageErrorKind
from step_challenge.core.exceptions import StorageError
from step_challenge.database.connection import SQLiteDatabase, open_database


def test_open_database_defaults_to_sqlite(tmp_path):
    db = open_database(None, sqlite_path=tmp_path / "nested" / "data.db")
    try:
        assert isinstance(db, SQLiteDatabase)
        assert db.dialect == Dialect.SQLITE
        assert db.native_upsert is False
    finally:
        db.close()


def test_execute_reports_inserted_id_and_rowcount(db):
    first = db.execute("INSERT INTO employees (name) VALUES (?)", ("Kari",))
    second = db.execute("INSERT INTO employees (name) VALUES (?)", ("Ola",))
    assert (first.inserted_id, second.inserted_id) == (1, 2)
    assert first.rows_affected == 1

    updated = db.execute("UPDATE employees SET name = name")
    assert updated.rows_affected == 2
    assert updated.inserted_id is None


def test_query_returns_dict_rows(db):
    db.execute("INSERT INTO locations (name) VALUES (?)", ("Oslo",))
    assert db.query("SELECT id, name FROM locations") == [{"id": 1, "name": "Oslo"}]


def test_unique_violation_is_classified(db):
    db.execute("INSERT INTO employees (name) VALUES (?)", ("Kari",))
    with pytest.raises(StorageError) as excinfo:
        db.execute("INSERT INTO employees (name) VALUES (?)", ("Kari",))
    assert excinfo.value.kind == StorageErrorKind.UNIQUE
    assert excinfo.value.is_unique_violation


def test_not_null_violation_is_classified(db):
    with pytest.raises(StorageError) as excinfo:
        db.execute("INSERT INTO employees (name) VALUES (?)", (None,))
    assert excinfo.value.kind == StorageErrorKind.NOT_NULL


def test_syntax_error_is_generic_storage_error(db):
    with pytest.raises(StorageError) as excinfo:
        db.query("SELEC nothing")
    assert excinfo.value.kind == StorageErrorKind.OTHER


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            db.execute("INSERT INTO employees (name) VALUES (?)", ("Kari",))
            raise RuntimeError("boom")
    assert db.query("SELECT COUNT(*) AS n FROM employees") == [{"n": 0}]


def test_transaction_commits_and_nests(db):
    with db.transaction():
        db.execute("INSERT INTO employees (name) VALUES (?)", ("Kari",))
        with db.transaction():
            db.execute("INSERT INTO employees (name) VALUES (?)", ("Ola",))
    assert db.query("SELECT COUNT(*) AS n FROM employees") == [{"n": 2}]
