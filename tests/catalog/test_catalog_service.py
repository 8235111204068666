from __future__ import annotations

import pytest

from step_challenge.catalog.model import NamedItem
from step_challenge.catalog.service import CatalogService
from step_challenge.core.enums import StorageErrorKind
from step_challenge.core.exceptions import ConflictError, StorageError, ValidationError


class InMemoryNamedItems:
    def __init__(self):
        self.items: dict[int, NamedItem] = {}
        self._id = 0

    def _check_unique(self, name: str, item_id: int | None = None) -> None:
        if any(i.name == name and i.id != item_id for i in self.items.values()):
            raise StorageError("UNIQUE constraint failed: employees.name", kind=StorageErrorKind.UNIQUE)

    def list_all(self):
        return sorted(self.items.values(), key=lambda i: i.name)

    def create(self, name: str) -> int:
        self._check_unique(name)
        self._id += 1
        self.items[self._id] = NamedItem(id=self._id, name=name)
        return self._id

    def rename(self, item_id: int, name: str) -> bool:
        self._check_unique(name, item_id)
        if item_id not in self.items:
            return False
        self.items[item_id] = NamedItem(id=item_id, name=name)
        return True

    def delete_by_id(self, item_id: int) -> bool:
        return self.items.pop(item_id, None) is not None


class BrokenRepo(InMemoryNamedItems):
    def create(self, name: str) -> int:
        raise StorageError("disk I/O error")


@pytest.fixture
def service():
    return CatalogService(InMemoryNamedItems(), label="Employee")


def test_create_trims_name(service):
    service.create("  Kari  ")
    assert service.list_all() == [{"id": 1, "name": "Kari"}]


@pytest.mark.parametrize("name", ["", "   ", None, 42])
def test_create_requires_name(service, name):
    with pytest.raises(ValidationError, match="Name is required"):
        service.create(name)


def test_duplicate_name_is_conflict(service):
    service.create("Kari")
    with pytest.raises(ConflictError, match="Employee already exists"):
        service.create("Kari")


def test_names_are_case_sensitive(service):
    service.create("Kari")
    service.create("kari")
    assert [i["name"] for i in service.list_all()] == ["Kari", "kari"]


def test_rename_onto_existing_name_is_conflict(service):
    service.create("Kari")
    other = service.create("Ola")
    with pytest.raises(ConflictError):
        service.rename(other, "Kari")


def test_rename_requires_name(service):
    item_id = service.create("Kari")
    with pytest.raises(ValidationError):
        service.rename(item_id, " ")


def test_other_storage_errors_propagate():
    service = CatalogService(BrokenRepo(), label="Location")
    with pytest.raises(StorageError, match="disk I/O error"):
        service.create("Oslo")


def test_delete_is_unconditional(service):
    item_id = service.create("Kari")
    service.delete(item_id)
    service.delete(item_id)
    assert service.list_all() == []
