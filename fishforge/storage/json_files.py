"""JSON file storage backend for FishForge."""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .base import ACCOUNTS, CATALOG, COOLDOWNS, PersistenceGateway, SnapshotResource

DEFAULT_FILE_NAMES = {
    CATALOG: "fish.json",
    ACCOUNTS: "users.json",
    COOLDOWNS: "daily_rewards.json",
}


class JsonFileSnapshot(SnapshotResource):
    """Snapshot stored as a single JSON document on disk."""

    def __init__(self, name: str, path: str | Path) -> None:
        self.name = name
        self.path = Path(path)

    async def load(self) -> Any | None:
        return await asyncio.to_thread(self._read)

    async def save(self, data: Any) -> None:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        await asyncio.to_thread(self._write, payload)

    def _read(self) -> Any | None:
        if not self.path.exists():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def json_gateway(data_dir: str | Path) -> PersistenceGateway:
    """Gateway writing ``fish.json``, ``users.json`` and ``daily_rewards.json``."""
    root = Path(data_dir).expanduser()
    return PersistenceGateway(
        catalog=JsonFileSnapshot(CATALOG, root / DEFAULT_FILE_NAMES[CATALOG]),
        accounts=JsonFileSnapshot(ACCOUNTS, root / DEFAULT_FILE_NAMES[ACCOUNTS]),
        cooldowns=JsonFileSnapshot(COOLDOWNS, root / DEFAULT_FILE_NAMES[COOLDOWNS]),
    )
