from __future__ import annotations

from contextlib import nullcontext
from datetime import datetime, timedelta
from typing import Any, Callable, ContextManager, Optional

from ..common.datetime_utils import now_utc
from ..common.logger import get_logger
from ..common.validators import is_blank
from ..core.constants import SESSION_TTL_HOURS
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidSessionError,
    SessionExpiredError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from .model import AdminIdentity, IssuedSession
from .passwords import generate_salt, generate_token, hash_password, verify_password
from .repository import AdminSessionRepository, AdminUserRepository

logger = get_logger(__name__)

Transaction = Callable[[], ContextManager[Any]]


class AuthService:
    """Use case: admin login/logout and session validation.

    Sessions move Active -> Expired -> Deleted. Expiry is detected lazily on the
    next use of the token, which also removes the row.
    """

    def __init__(
        self,
        users: AdminUserRepository,
        sessions: AdminSessionRepository,
        *,
        ttl: timedelta = timedelta(hours=SESSION_TTL_HOURS),
        transaction: Optional[Transaction] = None,
    ):
        self._users = users
        self._sessions = sessions
        self._ttl = ttl
        self._transaction = transaction or nullcontext

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def login(self, email: Any, password: Any, *, now: Optional[datetime] = None) -> IssuedSession:
        if is_blank(email) or is_blank(password) or not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password required")

        email = email.strip()
        user = self._users.get_by_email(email)
        if not user or not verify_password(password, user.salt, user.password_hash):
            logger.warning(f"Failed admin login for {email!r}")
            raise AuthenticationError("Invalid credentials")

        now = now or now_utc()
        token = generate_token()
        expires_at = now + self._ttl
        # A token collision must fail loudly, never replace another session.
        self._sessions.create(user_id=user.user_id, token=token, expires_at=expires_at)
        logger.info(f"Admin {user.email} logged in")
        return IssuedSession(token=token, expires_at=expires_at, max_age=self.ttl_seconds)

    def resolve(self, token: Optional[str], *, now: Optional[datetime] = None) -> AdminIdentity:
        if not token:
            raise UnauthorizedError("Unauthorized")

        now = now or now_utc()
        with self._transaction():
            session = self._sessions.get_by_token(token)
            expired = session is not None and session.is_expired(now)
            if expired:
                self._sessions.delete_by_id(session.session_id)

        if not session:
            raise InvalidSessionError("Invalid session")
        if expired:
            logger.info(f"Removed expired session of admin {session.email}")
            raise SessionExpiredError("Session expired")
        return AdminIdentity(user_id=session.user_id, email=session.email)

    def is_logged_in(self, token: Optional[str], *, now: Optional[datetime] = None) -> bool:
        try:
            self.resolve(token, now=now)
        except AuthenticationError:
            return False
        return True

    def logout(self, token: str) -> None:
        self._sessions.delete_by_token(token)

    def purge_expired(self, *, now: Optional[datetime] = None) -> int:
        removed = self._sessions.delete_expired(now or now_utc())
        if removed:
            logger.info(f"Purged {removed} expired admin session(s)")
        return removed


class AdminUserService:
    """Use case: manage admin accounts (admin only)."""

    def __init__(self, users: AdminUserRepository, *, transaction: Optional[Transaction] = None):
        self._users = users
        self._transaction = transaction or nullcontext

    def list_all(self) -> list[dict]:
        return [{"id": u.user_id, "email": u.email} for u in self._users.list_all()]

    def create(self, email: Any, password: Any) -> int:
        if is_blank(email) or is_blank(password) or not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password required")

        salt = generate_salt()
        try:
            return self._users.create(email=email.strip(), password_hash=hash_password(password, salt), salt=salt)
        except StorageError as e:
            raise self._map_conflict(e)

    def update(self, user_id: int, *, email: Any = None, password: Any = None) -> None:
        changes: dict[str, str] = {}
        if not is_blank(email):
            if not isinstance(email, str):
                raise ValidationError("Email must be a string")
            changes["email"] = email.strip()
        if not is_blank(password):
            if not isinstance(password, str):
                raise ValidationError("Password must be a string")
            salt = generate_salt()
            changes["password_hash"] = hash_password(password, salt)
            changes["salt"] = salt
        if not changes:
            raise ValidationError("Nothing to update")

        try:
            self._users.update(user_id, **changes)
        except StorageError as e:
            raise self._map_conflict(e)

    def delete(self, user_id: int) -> None:
        with self._transaction():
            if self._users.exists(user_id) and self._users.count() <= 1:
                raise ConflictError("Cannot delete the last admin user")
            self._users.delete_by_id(user_id)

    @staticmethod
    def _map_conflict(e: StorageError) -> Exception:
        if e.is_unique_violation:
            return ConflictError("Admin already exists")
        return e
