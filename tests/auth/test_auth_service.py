from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pytest

from step_challenge.auth.model import AdminSession, AdminUser
from step_challenge.auth.passwords import generate_salt, hash_password
from step_challenge.auth.service import AdminUserService, AuthService
from step_challenge.core.enums import StorageErrorKind
from step_challenge.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidSessionError,
    SessionExpiredError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)


class InMemoryAdminUsers:
    def __init__(self):
        self.users: dict[int, AdminUser] = {}
        self._id = 0

    def add(self, email: str, password: str) -> AdminUser:
        salt = generate_salt()
        self.create(email=email, password_hash=hash_password(password, salt), salt=salt)
        return self.users[self._id]

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        return next((u for u in self.users.values() if u.email == email), None)

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.email)

    def count(self) -> int:
        return len(self.users)

    def exists(self, user_id: int) -> bool:
        return user_id in self.users

    def create(self, *, email: str, password_hash: str, salt: str) -> int:
        if self.get_by_email(email):
            raise StorageError("UNIQUE constraint failed: admin_users.email", kind=StorageErrorKind.UNIQUE)
        self._id += 1
        self.users[self._id] = AdminUser(user_id=self._id, email=email, password_hash=password_hash, salt=salt)
        return self._id

    def update(self, user_id, *, email=None, password_hash=None, salt=None) -> bool:
        user = self.users.get(user_id)
        if not user:
            return False
        if email is not None and any(u.email == email and u.user_id != user_id for u in self.users.values()):
            raise StorageError("duplicate key", kind=StorageErrorKind.UNIQUE)
        self.users[user_id] = AdminUser(
            user_id=user_id,
            email=email if email is not None else user.email,
            password_hash=password_hash if password_hash is not None else user.password_hash,
            salt=salt if salt is not None else user.salt,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(user_id, None) is not None


class InMemoryAdminSessions:
    def __init__(self, users: InMemoryAdminUsers):
        self._users = users
        self.rows: dict[int, dict] = {}
        self._id = 0

    def create(self, *, user_id: int, token: str, expires_at: datetime) -> int:
        if any(r["token"] == token for r in self.rows.values()):
            raise StorageError("UNIQUE constraint failed: admin_sessions.token", kind=StorageErrorKind.UNIQUE)
        self._id += 1
        self.rows[self._id] = {"user_id": user_id, "token": token, "expires_at": expires_at}
        return self._id

    def get_by_token(self, token: str) -> Optional[AdminSession]:
        for sid, r in self.rows.items():
            if r["token"] == token:
                return AdminSession(
                    session_id=sid,
                    user_id=r["user_id"],
                    email=self._users.users[r["user_id"]].email,
                    token=token,
                    expires_at=r["expires_at"],
                )
        return None

    def delete_by_id(self, session_id: int) -> bool:
        return self.rows.pop(session_id, None) is not None

    def delete_by_token(self, token: str) -> bool:
        for sid, r in list(self.rows.items()):
            if r["token"] == token:
                del self.rows[sid]
                return True
        return False

    def delete_expired(self, now: datetime) -> int:
        stale = [sid for sid, r in self.rows.items() if r["expires_at"] <= now]
        for sid in stale:
            del self.rows[sid]
        return len(stale)


@pytest.fixture
def users():
    repo = InMemoryAdminUsers()
    repo.add("boss@example.com", "pw")
    return repo


@pytest.fixture
def sessions(users):
    return InMemoryAdminSessions(users)


@pytest.fixture
def auth(users, sessions):
    return AuthService(users, sessions)


def test_login_issues_24_hour_session(auth, sessions, fixed_now):
    issued = auth.login("boss@example.com", "pw", now=fixed_now)

    assert issued.expires_at == fixed_now + timedelta(hours=24)
    assert issued.max_age == 24 * 60 * 60
    assert len(sessions.rows) == 1
    assert auth.resolve(issued.token, now=fixed_now).email == "boss@example.com"


def test_login_wrong_password_raises(auth):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login("boss@example.com", "nope")


def test_login_matches_email_stored_trimmed(auth, users, fixed_now):
    AdminUserService(users).create("  padded@example.com ", "pw")

    issued = auth.login(" padded@example.com  ", "pw", now=fixed_now)

    assert auth.resolve(issued.token, now=fixed_now).email == "padded@example.com"


def test_login_unknown_email_raises(auth):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login("ghost@example.com", "pw")


@pytest.mark.parametrize("email,password", [("", "pw"), ("boss@example.com", ""), (None, None)])
def test_login_requires_both_fields(auth, email, password):
    with pytest.raises(ValidationError, match="Email and password required"):
        auth.login(email, password)


def test_resolve_without_token_is_unauthorized(auth):
    with pytest.raises(UnauthorizedError):
        auth.resolve(None)


def test_resolve_unknown_token_is_invalid(auth):
    with pytest.raises(InvalidSessionError):
        auth.resolve("deadbeef")


def test_expired_session_is_deleted_on_use(auth, sessions, fixed_now):
    issued = auth.login("boss@example.com", "pw", now=fixed_now)
    later = fixed_now + timedelta(hours=24)

    with pytest.raises(SessionExpiredError):
        auth.resolve(issued.token, now=later)

    assert sessions.rows == {}
    with pytest.raises(InvalidSessionError):
        auth.resolve(issued.token, now=later)


def test_is_logged_in_mirrors_resolve(auth, fixed_now):
    issued = auth.login("boss@example.com", "pw", now=fixed_now)

    assert auth.is_logged_in(issued.token, now=fixed_now + timedelta(hours=1))
    assert not auth.is_logged_in(None)
    assert not auth.is_logged_in(issued.token, now=fixed_now + timedelta(days=2))


def test_logout_removes_session(auth, sessions, fixed_now):
    issued = auth.login("boss@example.com", "pw", now=fixed_now)
    auth.logout(issued.token)
    assert sessions.rows == {}


def test_purge_expired(auth, sessions, fixed_now):
    auth.login("boss@example.com", "pw", now=fixed_now - timedelta(days=3))
    fresh = auth.login("boss@example.com", "pw", now=fixed_now)

    assert auth.purge_expired(now=fixed_now) == 1
    assert [r["token"] for r in sessions.rows.values()] == [fresh.token]


def test_admin_create_stores_hash_not_password(users):
    svc = AdminUserService(users)
    user_id = svc.create("new@example.com", "plain-text")

    stored = users.users[user_id]
    assert stored.password_hash != "plain-text"
    assert stored.password_hash == hash_password("plain-text", stored.salt)


def test_admin_create_duplicate_email_is_conflict(users):
    svc = AdminUserService(users)
    with pytest.raises(ConflictError, match="Admin already exists"):
        svc.create("boss@example.com", "other")


def test_admin_update_resalts_password(users):
    svc = AdminUserService(users)
    before = users.users[1]

    svc.update(1, password="new-pw")

    after = users.users[1]
    assert after.salt != before.salt
    assert after.email == before.email
    assert after.password_hash == hash_password("new-pw", after.salt)


def test_admin_update_requires_a_field(users):
    with pytest.raises(ValidationError, match="Nothing to update"):
        AdminUserService(users).update(1)


def test_admin_update_email_conflict(users):
    users.add("other@example.com", "pw")
    with pytest.raises(ConflictError):
        AdminUserService(users).update(2, email="boss@example.com")


def test_cannot_delete_last_admin(users):
    svc = AdminUserService(users)
    with pytest.raises(ConflictError, match="last admin"):
        svc.delete(1)
    assert users.count() == 1


def test_delete_admin_when_others_remain(users):
    users.add("other@example.com", "pw")
    svc = AdminUserService(users)

    svc.delete(2)
    svc.delete(99)

    assert [u.email for u in users.list_all()] == ["boss@example.com"]
