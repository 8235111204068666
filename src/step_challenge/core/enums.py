from __future__ import annotations

from enum import Enum


class Dialect(str, Enum):
    """Storage engines the adapter layer knows how to talk to."""

    SQLITE = "sqlite"
    POSTGRES = "postgres"


class StorageErrorKind(str, Enum):
    """Normalized constraint-violation categories across engines."""

    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"
    NOT_NULL = "NOT_NULL"
    OTHER = "OTHER"
