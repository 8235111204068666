from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ContextManager, Dict, Iterator, List, Optional, Protocol, Sequence

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from ..common.logger import get_logger
from ..core.constants import DEFAULT_PG_MAX_CONN, DEFAULT_PG_MIN_CONN
from ..core.enums import Dialect, StorageErrorKind
from ..core.exceptions import StorageError

logger = get_logger(__name__)

Params = Sequence[Any]


@dataclass(frozen=True)
class ExecuteResult:
    rows_affected: int
    inserted_id: Optional[int] = None


class Database(Protocol):
    """Uniform query/execute interface over the supported engines.

    SQL is written with positional ``?`` placeholders; each engine rewrites
    them into its own driver style. Rows always come back as plain dicts.
    """

    dialect: Dialect
    native_upsert: bool

    def query(self, sql: str, params: Params = ()) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def execute(self, sql: str, params: Params = ()) -> ExecuteResult:
        raise NotImplementedError

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


def _is_insert(sql: str) -> bool:
    return sql.lstrip()[:6].upper() == "INSERT"


# SQLite extended result codes (stable across versions).
_SQLITE_CODES = {
    1555: StorageErrorKind.UNIQUE,  # SQLITE_CONSTRAINT_PRIMARYKEY
    2067: StorageErrorKind.UNIQUE,  # SQLITE_CONSTRAINT_UNIQUE
    787: StorageErrorKind.FOREIGN_KEY,  # SQLITE_CONSTRAINT_FOREIGNKEY
    1299: StorageErrorKind.NOT_NULL,  # SQLITE_CONSTRAINT_NOTNULL
}


def translate_sqlite_error(exc: sqlite3.Error) -> StorageError:
    kind = _SQLITE_CODES.get(getattr(exc, "sqlite_errorcode", None), StorageErrorKind.OTHER)
    if kind == StorageErrorKind.OTHER and isinstance(exc, sqlite3.IntegrityError):
        # Older interpreters do not expose sqlite_errorcode.
        text = str(exc).upper()
        if "UNIQUE" in text:
            kind = StorageErrorKind.UNIQUE
        elif "FOREIGN KEY" in text:
            kind = StorageErrorKind.FOREIGN_KEY
        elif "NOT NULL" in text:
            kind = StorageErrorKind.NOT_NULL
    return StorageError(str(exc), kind=kind)


class SQLiteDatabase:
    """Embedded engine: one shared connection guarded by a re-entrant lock."""

    dialect = Dialect.SQLITE
    native_upsert = False

    def __init__(self, path: str | Path, *, timeout: float = 30.0):
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            self._path,
            timeout=timeout,
            check_same_thread=False,
            isolation_level=None,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.RLock()
        self._in_transaction = False

    @property
    def path(self) -> str:
        return self._path

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            cur = self._conn.cursor()
            try:
                yield cur
            except sqlite3.Error as exc:
                raise translate_sqlite_error(exc) from exc
            finally:
                cur.close()

    def query(self, sql: str, params: Params = ()) -> List[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute(sql, tuple(params))
            return [dict(row) for row in cur.fetchall()]

    def execute(self, sql: str, params: Params = ()) -> ExecuteResult:
        with self._cursor() as cur:
            cur.execute(sql, tuple(params))
            inserted_id = cur.lastrowid if _is_insert(sql) else None
            return ExecuteResult(rows_affected=max(cur.rowcount, 0), inserted_id=inserted_id)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._in_transaction:
                yield
                return
            with self._cursor() as cur:
                cur.execute("BEGIN IMMEDIATE")
            self._in_transaction = True
            try:
                yield
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            else:
                with self._cursor() as cur:
                    cur.execute("COMMIT")
            finally:
                self._in_transaction = False

    def close(self) -> None:
        with self._lock:
            self._conn.close()


_PG_CODES = {
    "23505": StorageErrorKind.UNIQUE,
    "23503": StorageErrorKind.FOREIGN_KEY,
    "23502": StorageErrorKind.NOT_NULL,
}


def translate_pg_error(exc: psycopg2.Error) -> StorageError:
    if isinstance(exc, pg_errors.UniqueViolation):
        kind = StorageErrorKind.UNIQUE
    elif isinstance(exc, pg_errors.ForeignKeyViolation):
        kind = StorageErrorKind.FOREIGN_KEY
    elif isinstance(exc, pg_errors.NotNullViolation):
        kind = StorageErrorKind.NOT_NULL
    else:
        kind = _PG_CODES.get(getattr(exc, "pgcode", None) or "", StorageErrorKind.OTHER)
    message = (getattr(exc, "pgerror", None) or str(exc)).strip()
    return StorageError(message, kind=kind)


def to_pyformat(sql: str) -> str:
    """Rewrite ``?`` placeholders into psycopg2's ``%s`` style.

    Literal ``%`` is doubled; anything inside quotes is left alone.
    """
    out: list[str] = []
    in_single = False
    in_double = False
    for ch in sql:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == "?" and not in_single and not in_double:
            out.append("%s")
            continue
        if ch == "%":
            out.append("%%")
            continue
        out.append(ch)
    return "".join(out)


class PostgresDatabase:
    """Networked engine backed by a psycopg2 connection pool.

    Each statement runs on its own pooled connection and commits immediately,
    unless a ``transaction()`` block has pinned a connection to the thread.
    """

    dialect = Dialect.POSTGRES
    native_upsert = True

    def __init__(
        self,
        dsn: str,
        *,
        sslmode: Optional[str] = None,
        min_conn: int = DEFAULT_PG_MIN_CONN,
        max_conn: int = DEFAULT_PG_MAX_CONN,
    ):
        kwargs: Dict[str, Any] = {}
        if sslmode:
            kwargs["sslmode"] = sslmode
        try:
            self._pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn, **kwargs)
        except psycopg2.Error as exc:
            logger.error(f"Failed to initialize database pool: {exc}")
            raise translate_pg_error(exc) from exc
        self._local = threading.local()
        # getconn() fails fast once max_conn are out; callers queue here instead.
        self._slots = threading.BoundedSemaphore(max_conn)

    def _checkout(self):
        self._slots.acquire()
        try:
            return self._pool.getconn()
        except psycopg2.Error as exc:
            self._slots.release()
            raise translate_pg_error(exc) from exc

    def _checkin(self, conn) -> None:
        try:
            self._pool.putconn(conn)
        finally:
            self._slots.release()

    @contextmanager
    def _connection(self):
        pinned = getattr(self._local, "conn", None)
        if pinned is not None:
            yield pinned
            return
        conn = self._checkout()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._checkin(conn)

    def _run(self, conn, sql: str, params: Params, *, fetch: bool):
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(to_pyformat(sql), tuple(params))
                if fetch:
                    return [dict(row) for row in cur.fetchall()], cur.rowcount
                if cur.description is not None:
                    row = cur.fetchone()
                    return row, cur.rowcount
                return None, cur.rowcount
        except psycopg2.Error as exc:
            raise translate_pg_error(exc) from exc

    def query(self, sql: str, params: Params = ()) -> List[Dict[str, Any]]:
        with self._connection() as conn:
            rows, _ = self._run(conn, sql, params, fetch=True)
            return rows

    def execute(self, sql: str, params: Params = ()) -> ExecuteResult:
        if _is_insert(sql) and "RETURNING" not in sql.upper():
            sql = sql.rstrip().rstrip(";") + " RETURNING id"
        with self._connection() as conn:
            row, rowcount = self._run(conn, sql, params, fetch=False)
            inserted_id = int(row["id"]) if row and row.get("id") is not None else None
            return ExecuteResult(rows_affected=max(rowcount, 0), inserted_id=inserted_id)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "conn", None) is not None:
            yield
            return
        conn = self._checkout()
        self._local.conn = conn
        try:
            yield
            try:
                conn.commit()
            except psycopg2.Error as exc:
                raise translate_pg_error(exc) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._checkin(conn)

    def close(self) -> None:
        self._pool.closeall()
        logger.info("Database connection pool closed.")


def open_database(
    database_url: Optional[str] = None,
    *,
    sqlite_path: str | Path = "data.db",
    sslmode: Optional[str] = None,
    min_conn: int = DEFAULT_PG_MIN_CONN,
    max_conn: int = DEFAULT_PG_MAX_CONN,
) -> Database:
    """Pick the engine once for the process lifetime.

    PostgreSQL when a connection URL is configured, SQLite on a local file
    otherwise.
    """
    if database_url:
        db = PostgresDatabase(database_url, sslmode=sslmode, min_conn=min_conn, max_conn=max_conn)
        logger.info("Using PostgreSQL storage.")
        return db
    db = SQLiteDatabase(sqlite_path)
    logger.info(f"Using SQLite storage at {db.path}.")
    return db
