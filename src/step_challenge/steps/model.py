from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class StepEntryRow:
    """Read-model for the admin table (entry joined with names)."""

    entry_id: int
    entry_date: date
    steps: int
    employee_id: int
    employee_name: str
    location_id: Optional[int]
    location_name: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "date": self.entry_date.isoformat(),
            "steps": self.steps,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "location_id": self.location_id,
            "location_name": self.location_name,
        }


@dataclass(frozen=True)
class LocationAverage:
    """Read-model: mean steps per location per day."""

    entry_date: date
    location: str
    average: float

    def to_dict(self) -> dict:
        return {"date": self.entry_date.isoformat(), "location": self.location, "average": self.average}
