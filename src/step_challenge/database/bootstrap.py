from __future__ import annotations

from typing import Iterable

from ..auth.passwords import generate_salt, hash_password
from ..common.logger import get_logger
from ..core.enums import Dialect
from .connection import Database

logger = get_logger(__name__)

TABLES = ("employees", "locations", "steps", "admin_users", "admin_sessions")

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS employees (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS locations (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT UNIQUE NOT NULL
);

-- One row per employee per day; location is cleared when its location goes away.
CREATE TABLE IF NOT EXISTS steps (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    employee_id INTEGER NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
    location_id INTEGER REFERENCES locations(id) ON DELETE SET NULL,
    date        TEXT NOT NULL,
    steps       INTEGER NOT NULL CHECK (steps >= 0),
    UNIQUE (employee_id, date)
);

CREATE TABLE IF NOT EXISTS admin_users (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    email         TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    salt          TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS admin_sessions (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL REFERENCES admin_users(id) ON DELETE CASCADE,
    token       TEXT UNIQUE NOT NULL,
    expires_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_steps_date ON steps(date);
CREATE INDEX IF NOT EXISTS idx_admin_sessions_expires ON admin_sessions(expires_at);
"""

POSTGRES_SCHEMA = """
CREATE TABLE IF NOT EXISTS employees (
    id          SERIAL PRIMARY KEY,
    name        TEXT UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS locations (
    id          SERIAL PRIMARY KEY,
    name        TEXT UNIQUE NOT NULL
);

-- One row per employee per day; location is cleared when its location goes away.
CREATE TABLE IF NOT EXISTS steps (
    id          SERIAL PRIMARY KEY,
    employee_id INTEGER NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
    location_id INTEGER REFERENCES locations(id) ON DELETE SET NULL,
    date        DATE NOT NULL,
    steps       INTEGER NOT NULL CHECK (steps >= 0),
    UNIQUE (employee_id, date)
);

CREATE TABLE IF NOT EXISTS admin_users (
    id            SERIAL PRIMARY KEY,
    email         TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    salt          TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS admin_sessions (
    id          SERIAL PRIMARY KEY,
    user_id     INTEGER NOT NULL REFERENCES admin_users(id) ON DELETE CASCADE,
    token       TEXT UNIQUE NOT NULL,
    expires_at  TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_steps_date ON steps(date);
CREATE INDEX IF NOT EXISTS idx_admin_sessions_expires ON admin_sessions(expires_at);
"""

_SCHEMAS = {
    Dialect.SQLITE: SQLITE_SCHEMA,
    Dialect.POSTGRES: POSTGRES_SCHEMA,
}


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.strip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema scripts (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False

    for ch in _strip_comments(sql):
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def apply_schema(db: Database) -> None:
    """Create every table and index if missing. Safe to call repeatedly."""
    schema = _SCHEMAS[db.dialect]
    with db.transaction():
        for stmt in iter_sql_statements(schema):
            db.execute(stmt)
    logger.info(f"Database schema ready ({db.dialect.value}).")


def ensure_default_admin(db: Database, *, email: str, password: str) -> bool:
    """Seed one administrator when the admin table is empty.

    Returns True when a row was created.
    """
    with db.transaction():
        rows = db.query("SELECT COUNT(*) AS count FROM admin_users")
        if int(rows[0]["count"]) > 0:
            return False
        salt = generate_salt()
        db.execute(
            "INSERT INTO admin_users (email, password_hash, salt) VALUES (?, ?, ?)",
            (email, hash_password(password, salt), salt),
        )
    logger.info(f"Seeded default admin user {email}.")
    return True


def list_tables(db: Database) -> list[str]:
    if db.dialect == Dialect.SQLITE:
        rows = db.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
    else:
        rows = db.query(
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema = current_schema() ORDER BY table_name"
        )
    return [row["name"] for row in rows]
