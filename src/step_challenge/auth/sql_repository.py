from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import coerce_datetime
from ..database.connection import Database
from .model import AdminSession, AdminUser
from .repository import AdminSessionRepository, AdminUserRepository


def _timestamp_param(value: datetime) -> str:
    # One textual format for both engines keeps SQLite comparisons ordered.
    return value.isoformat(sep=" ", timespec="microseconds")


def _to_user(row: Dict[str, Any]) -> AdminUser:
    return AdminUser(
        user_id=int(row["id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        salt=row["salt"],
    )


class SQLAdminUserRepository(AdminUserRepository):
    def __init__(self, db: Database):
        self._db = db

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        rows = self._db.query(
            "SELECT id, email, password_hash, salt FROM admin_users WHERE email = ?",
            (email,),
        )
        return _to_user(rows[0]) if rows else None

    def list_all(self) -> Sequence[AdminUser]:
        rows = self._db.query("SELECT id, email, password_hash, salt FROM admin_users ORDER BY email")
        return [_to_user(r) for r in rows]

    def count(self) -> int:
        rows = self._db.query("SELECT COUNT(*) AS count FROM admin_users")
        return int(rows[0]["count"])

    def exists(self, user_id: int) -> bool:
        return bool(self._db.query("SELECT id FROM admin_users WHERE id = ?", (user_id,)))

    def create(self, *, email: str, password_hash: str, salt: str) -> int:
        result = self._db.execute(
            "INSERT INTO admin_users (email, password_hash, salt) VALUES (?, ?, ?)",
            (email, password_hash, salt),
        )
        return int(result.inserted_id)

    def update(
        self,
        user_id: int,
        *,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        salt: Optional[str] = None,
    ) -> bool:
        fields: list[str] = []
        params: list[Any] = []
        if email is not None:
            fields.append("email = ?")
            params.append(email)
        if password_hash is not None:
            fields.append("password_hash = ?")
            fields.append("salt = ?")
            params.extend([password_hash, salt])
        if not fields:
            return False
        params.append(user_id)
        result = self._db.execute(f"UPDATE admin_users SET {', '.join(fields)} WHERE id = ?", params)
        return result.rows_affected > 0

    def delete_by_id(self, user_id: int) -> bool:
        return self._db.execute("DELETE FROM admin_users WHERE id = ?", (user_id,)).rows_affected > 0


class SQLAdminSessionRepository(AdminSessionRepository):
    def __init__(self, db: Database):
        self._db = db

    def create(self, *, user_id: int, token: str, expires_at: datetime) -> int:
        result = self._db.execute(
            "INSERT INTO admin_sessions (user_id, token, expires_at) VALUES (?, ?, ?)",
            (user_id, token, _timestamp_param(expires_at)),
        )
        return int(result.inserted_id)

    def get_by_token(self, token: str) -> Optional[AdminSession]:
        rows = self._db.query(
            """
            SELECT s.id, s.user_id, s.token, s.expires_at, u.email
            FROM admin_sessions s
            JOIN admin_users u ON u.id = s.user_id
            WHERE s.token = ?
            """,
            (token,),
        )
        if not rows:
            return None
        row = rows[0]
        return AdminSession(
            session_id=int(row["id"]),
            user_id=int(row["user_id"]),
            email=row["email"],
            token=row["token"],
            expires_at=coerce_datetime(row["expires_at"]),
        )

    def delete_by_id(self, session_id: int) -> bool:
        return self._db.execute("DELETE FROM admin_sessions WHERE id = ?", (session_id,)).rows_affected > 0

    def delete_by_token(self, token: str) -> bool:
        return self._db.execute("DELETE FROM admin_sessions WHERE token = ?", (token,)).rows_affected > 0

    def delete_expired(self, now: datetime) -> int:
        result = self._db.execute(
            "DELETE FROM admin_sessions WHERE expires_at <= ?",
            (_timestamp_param(now),),
        )
        return result.rows_affected
