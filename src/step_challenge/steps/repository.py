from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LocationAverage, StepEntryRow


class StepRepository(Protocol):
    def upsert(self, *, employee_id: int, location_id: int, entry_date: date, steps: int) -> None:
        """Write the (employee, date) row, overwriting steps and location if present."""
        raise NotImplementedError

    def update(
        self,
        entry_id: int,
        *,
        steps: Optional[int] = None,
        entry_date: Optional[date] = None,
        location_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, entry_id: int) -> bool:
        raise NotImplementedError

    def list_admin_view(self) -> Sequence[StepEntryRow]:
        raise NotImplementedError

    def daily_location_averages(self) -> Sequence[LocationAverage]:
        raise NotImplementedError
