from __future__ import annotations

from step_challenge.auth.passwords import verify_password
from step_challenge.database.bootstrap import (
    TABLES,
    apply_schema,
    ensure_default_admin,
    iter_sql_statements,
    list_tables,
)


def test_schema_creates_all_tables_and_is_idempotent(db):
    apply_schema(db)
    apply_schema(db)
    assert set(TABLES) <= set(list_tables(db))


def test_default_admin_seeded_once_with_hashed_password(db):
    assert ensure_default_admin(db, email="first@example.com", password="pw") is True
    assert ensure_default_admin(db, email="second@example.com", password="pw2") is False

    rows = db.query("SELECT email, password_hash, salt FROM admin_users")
    assert len(rows) == 1
    row = rows[0]
    assert row["email"] == "first@example.com"
    assert row["password_hash"] != "pw"
    assert verify_password("pw", row["salt"], row["password_hash"])


def test_statement_splitter_respects_quotes_and_comments():
    sql = """
    -- leading comment
    INSERT INTO t VALUES ('a;b');
    SELECT 1;
    """
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
