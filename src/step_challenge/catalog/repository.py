from __future__ import annotations

from typing import Protocol, Sequence

from .model import NamedItem


class NamedItemRepository(Protocol):
    def list_all(self) -> Sequence[NamedItem]:
        raise NotImplementedError

    def create(self, name: str) -> int:
        raise NotImplementedError

    def rename(self, item_id: int, name: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, item_id: int) -> bool:
        raise NotImplementedError
