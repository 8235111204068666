from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import today_local
from ..common.logger import get_logger
from ..common.validators import is_blank, require_id, require_past_or_today, require_step_count
from ..core.enums import StorageErrorKind
from ..core.exceptions import ConflictError, StorageError, ValidationError
from .repository import StepRepository

logger = get_logger(__name__)


class StepsService:
    """Use case: record daily steps, admin corrections and location averages."""

    def __init__(self, steps: StepRepository):
        self._steps = steps

    def record(
        self,
        employee_id: Any,
        location_id: Any,
        entry_date: Any,
        steps: Any,
        *,
        today: Optional[date] = None,
    ) -> None:
        """Write today's (or a past day's) count; a second write for the same
        employee and day overwrites steps and location on the existing row."""
        if is_blank(employee_id) or is_blank(location_id) or is_blank(entry_date) or steps is None:
            raise ValidationError("Missing fields")

        employee_id = require_id(employee_id, "Invalid employee")
        location_id = require_id(location_id, "Invalid location")
        steps = require_step_count(steps)
        day = require_past_or_today(entry_date, today=today or today_local())

        try:
            self._steps.upsert(employee_id=employee_id, location_id=location_id, entry_date=day, steps=steps)
        except StorageError as e:
            raise self._map_storage_error(e, unique_is_conflict=False)

    def update(
        self,
        entry_id: int,
        *,
        steps: Any = None,
        entry_date: Any = None,
        location_id: Any = None,
        employee_id: Any = None,
        today: Optional[date] = None,
    ) -> None:
        changes: dict[str, Any] = {}
        if steps is not None:
            changes["steps"] = require_step_count(steps)
        if not is_blank(entry_date):
            changes["entry_date"] = require_past_or_today(entry_date, today=today or today_local())
        if not is_blank(location_id):
            changes["location_id"] = require_id(location_id, "Invalid location")
        if not is_blank(employee_id):
            changes["employee_id"] = require_id(employee_id, "Invalid employee")
        if not changes:
            raise ValidationError("No fields to update")

        try:
            self._steps.update(entry_id, **changes)
        except StorageError as e:
            raise self._map_storage_error(e, unique_is_conflict=True)

    def delete(self, entry_id: int) -> None:
        self._steps.delete_by_id(entry_id)

    def list_entries(self) -> list[dict]:
        return [row.to_dict() for row in self._steps.list_admin_view()]

    def averages(self) -> list[dict]:
        return [row.to_dict() for row in self._steps.daily_location_averages()]

    @staticmethod
    def _map_storage_error(e: StorageError, *, unique_is_conflict: bool) -> Exception:
        if e.kind == StorageErrorKind.FOREIGN_KEY:
            return ValidationError("Unknown employee or location")
        if unique_is_conflict and e.kind == StorageErrorKind.UNIQUE:
            logger.info(f"Step entry collision: {e}")
            return ConflictError("Step entry already exists for this employee and date")
        return e
