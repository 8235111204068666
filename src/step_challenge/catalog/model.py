from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class NamedItem:
    """Employee or location: an id and a unique display name."""

    id: int
    name: str

    def to_dict(self) -> dict:
        return asdict(self)
