from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AdminUser:
    """Administrator account. ``password_hash`` never leaves the service layer."""

    user_id: int
    email: str
    password_hash: str
    salt: str


@dataclass(frozen=True)
class AdminSession:
    """Session row joined with its owning admin's email."""

    session_id: int
    user_id: int
    email: str
    token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class AdminIdentity:
    """What a protected request knows about its caller."""

    user_id: int
    email: str

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email}


@dataclass(frozen=True)
class IssuedSession:
    token: str
    expires_at: datetime
    max_age: int
