from __future__ import annotations

from typing import Sequence

from ..database.connection import Database
from .model import NamedItem
from .repository import NamedItemRepository

_TABLES = {"employees", "locations"}


class SQLNamedItemRepository(NamedItemRepository):
    """Shared id/name table access for ``employees`` and ``locations``."""

    def __init__(self, db: Database, *, table: str):
        if table not in _TABLES:
            raise ValueError(f"Unsupported catalog table: {table}")
        self._db = db
        self._table = table

    def list_all(self) -> Sequence[NamedItem]:
        rows = self._db.query(f"SELECT id, name FROM {self._table} ORDER BY name")
        return [NamedItem(id=int(r["id"]), name=r["name"]) for r in rows]

    def create(self, name: str) -> int:
        result = self._db.execute(f"INSERT INTO {self._table} (name) VALUES (?)", (name,))
        return int(result.inserted_id)

    def rename(self, item_id: int, name: str) -> bool:
        result = self._db.execute(f"UPDATE {self._table} SET name = ? WHERE id = ?", (name, item_id))
        return result.rows_affected > 0

    def delete_by_id(self, item_id: int) -> bool:
        return self._db.execute(f"DELETE FROM {self._table} WHERE id = ?", (item_id,)).rows_affected > 0
