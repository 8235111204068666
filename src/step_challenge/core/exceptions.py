from __future__ import annotations

from .enums import StorageErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a write collides with an existing unique value."""

    status_code = 409


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class UnauthorizedError(AuthenticationError):
    """Raised when a protected request carries no session token."""


class InvalidSessionError(AuthenticationError):
    """Raised when the session token is unknown."""


class SessionExpiredError(AuthenticationError):
    """Raised when the session token is past its expiry."""


class StorageError(Exception):
    """Engine failure translated at the adapter boundary.

    ``kind`` tells callers which constraint (if any) was violated so they never
    have to look at driver-specific error text.
    """

    def __init__(self, message: str, *, kind: StorageErrorKind = StorageErrorKind.OTHER):
        super().__init__(message)
        self.kind = kind

    @property
    def is_unique_violation(self) -> bool:
        return self.kind == StorageErrorKind.UNIQUE
