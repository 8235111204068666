from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AdminSession, AdminUser


class AdminUserRepository(Protocol):
    """Repository interface for admin accounts.

    Note (DIP): services depend on this interface, not on a concrete engine.
    """

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AdminUser]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def exists(self, user_id: int) -> bool:
        raise NotImplementedError

    def create(self, *, email: str, password_hash: str, salt: str) -> int:
        raise NotImplementedError

    def update(
        self,
        user_id: int,
        *,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        salt: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError


class AdminSessionRepository(Protocol):
    def create(self, *, user_id: int, token: str, expires_at: datetime) -> int:
        raise NotImplementedError

    def get_by_token(self, token: str) -> Optional[AdminSession]:
        raise NotImplementedError

    def delete_by_id(self, session_id: int) -> bool:
        raise NotImplementedError

    def delete_by_token(self, token: str) -> bool:
        raise NotImplementedError

    def delete_expired(self, now: datetime) -> int:
        raise NotImplementedError
