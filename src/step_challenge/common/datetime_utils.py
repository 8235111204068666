from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp) into a date."""
    value = value.strip()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def today_local() -> date:
    """Current local calendar date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (storage keeps naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def coerce_date(value: Any) -> Optional[date]:
    """Normalize DATE columns across engines.

    SQLite returns the stored ISO text, psycopg2 returns ``datetime.date``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise TypeError(f"Unsupported DATE value type: {type(value)!r}")


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Normalize TIMESTAMP columns across engines to naive UTC datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, str):
        return coerce_datetime(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    raise TypeError(f"Unsupported TIMESTAMP value type: {type(value)!r}")
