from __future__ import annotations

from typing import Any

from ..common.logger import get_logger
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, StorageError
from .repository import NamedItemRepository

logger = get_logger(__name__)


class CatalogService:
    """Use case: curate a list of uniquely named items (employees, locations)."""

    def __init__(self, repo: NamedItemRepository, *, label: str):
        self._repo = repo
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    def list_all(self) -> list[dict]:
        return [item.to_dict() for item in self._repo.list_all()]

    def create(self, name: Any) -> int:
        name = require_non_empty(name, "Name is required")
        try:
            return self._repo.create(name)
        except StorageError as e:
            raise self._map_conflict(e, name)

    def rename(self, item_id: int, name: Any) -> None:
        name = require_non_empty(name, "Name is required")
        try:
            self._repo.rename(item_id, name)
        except StorageError as e:
            raise self._map_conflict(e, name)

    def delete(self, item_id: int) -> None:
        # Dependent step entries are handled by the schema's FK actions.
        self._repo.delete_by_id(item_id)

    def _map_conflict(self, e: StorageError, name: str) -> Exception:
        if e.is_unique_violation:
            logger.info(f"{self._label} name already taken: {name!r}")
            return ConflictError(f"{self._label} already exists")
        return e
