"""Storage abstractions used by the FishForge engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

CATALOG = "catalog"
ACCOUNTS = "accounts"
COOLDOWNS = "cooldowns"
RESOURCE_NAMES = (CATALOG, ACCOUNTS, COOLDOWNS)


class SnapshotResource(Protocol):
    """One independently persisted snapshot."""

    name: str

    async def load(self) -> Any | None:
        """Return the stored data, or ``None`` when nothing was saved yet."""
        ...

    async def save(self, data: Any) -> None:
        ...


@dataclass(slots=True)
class PersistenceGateway:
    """Bundle of the three snapshot resources the engine persists."""

    catalog: SnapshotResource
    accounts: SnapshotResource
    cooldowns: SnapshotResource
    on_close: Callable[[], Awaitable[None]] | None = None

    def resource(self, name: str) -> SnapshotResource:
        if name not in RESOURCE_NAMES:
            raise KeyError(f"Unknown snapshot resource {name}")
        return getattr(self, name)

    async def close(self) -> None:
        if self.on_close is not None:
            await self.on_close()
