from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..database.connection import Database
from .model import LocationAverage, StepEntryRow
from .repository import StepRepository

_TWO_PLACES = Decimal("0.01")


def round_average(value: Any) -> float:
    """Round half-up to 2 decimals (SQLite yields float, PostgreSQL Decimal)."""
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class SQLStepRepository(StepRepository):
    def __init__(self, db: Database):
        self._db = db

    def upsert(self, *, employee_id: int, location_id: int, entry_date: date, steps: int) -> None:
        day = entry_date.isoformat()
        if self._db.native_upsert:
            self._db.execute(
                """
                INSERT INTO steps (employee_id, location_id, date, steps)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (employee_id, date)
                DO UPDATE SET steps = EXCLUDED.steps, location_id = EXCLUDED.location_id
                """,
                (employee_id, location_id, day, steps),
            )
            return

        # No native upsert: update first, insert on miss, as one transaction.
        with self._db.transaction():
            result = self._db.execute(
                "UPDATE steps SET steps = ?, location_id = ? WHERE employee_id = ? AND date = ?",
                (steps, location_id, employee_id, day),
            )
            if result.rows_affected == 0:
                self._db.execute(
                    "INSERT INTO steps (employee_id, location_id, date, steps) VALUES (?, ?, ?, ?)",
                    (employee_id, location_id, day, steps),
                )

    def update(
        self,
        entry_id: int,
        *,
        steps: Optional[int] = None,
        entry_date: Optional[date] = None,
        location_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> bool:
        fields: list[str] = []
        params: list[Any] = []
        if steps is not None:
            fields.append("steps = ?")
            params.append(steps)
        if entry_date is not None:
            fields.append("date = ?")
            params.append(entry_date.isoformat())
        if location_id is not None:
            fields.append("location_id = ?")
            params.append(location_id)
        if employee_id is not None:
            fields.append("employee_id = ?")
            params.append(employee_id)
        if not fields:
            return False
        params.append(entry_id)
        result = self._db.execute(f"UPDATE steps SET {', '.join(fields)} WHERE id = ?", params)
        return result.rows_affected > 0

    def delete_by_id(self, entry_id: int) -> bool:
        return self._db.execute("DELETE FROM steps WHERE id = ?", (entry_id,)).rows_affected > 0

    def list_admin_view(self) -> Sequence[StepEntryRow]:
        rows = self._db.query(
            """
            SELECT s.id, s.date, s.steps,
                   e.id AS employee_id, e.name AS employee_name,
                   l.id AS location_id, l.name AS location_name
            FROM steps s
            JOIN employees e ON e.id = s.employee_id
            LEFT JOIN locations l ON l.id = s.location_id
            ORDER BY s.date DESC, e.name ASC
            """
        )
        return [
            StepEntryRow(
                entry_id=int(r["id"]),
                entry_date=coerce_date(r["date"]),
                steps=int(r["steps"]),
                employee_id=int(r["employee_id"]),
                employee_name=r["employee_name"],
                location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
                location_name=r.get("location_name"),
            )
            for r in rows
        ]

    def daily_location_averages(self) -> Sequence[LocationAverage]:
        rows = self._db.query(
            """
            SELECT s.date AS date, l.name AS location, AVG(s.steps) AS average
            FROM steps s
            JOIN locations l ON l.id = s.location_id
            GROUP BY s.date, l.name
            ORDER BY s.date ASC, l.name ASC
            """
        )
        return [
            LocationAverage(
                entry_date=coerce_date(r["date"]),
                location=r["location"],
                average=round_average(r["average"]),
            )
            for r in rows
        ]
