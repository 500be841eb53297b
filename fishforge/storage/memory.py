"""In-memory storage backend for FishForge."""

from __future__ import annotations

import copy
from typing import Any

from .base import ACCOUNTS, CATALOG, COOLDOWNS, PersistenceGateway, SnapshotResource


class InMemorySnapshot(SnapshotResource):
    def __init__(self, name: str) -> None:
        self.name = name
        self._data: Any | None = None
        self.saves = 0

    async def load(self) -> Any | None:
        return copy.deepcopy(self._data)

    async def save(self, data: Any) -> None:
        self._data = copy.deepcopy(data)
        self.saves += 1


def memory_gateway() -> PersistenceGateway:
    """Gateway whose snapshots live only as long as the returned object."""
    return PersistenceGateway(
        catalog=InMemorySnapshot(CATALOG),
        accounts=InMemorySnapshot(ACCOUNTS),
        cooldowns=InMemorySnapshot(COOLDOWNS),
    )
