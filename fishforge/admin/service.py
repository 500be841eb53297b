"""Administrative operations for FishForge bots."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from ..config import EconomyConfig
from ..domain.economy import EconomyEngine
from ..domain.items import Item
from ..loaders.snapshots import load_catalog_file

audit_logger = logging.getLogger("fishforge.audit")


class AdminService:
    def __init__(self, engine: EconomyEngine, economy: EconomyConfig) -> None:
        self._engine = engine
        self._economy = economy

    async def reload_catalog(
        self,
        items: Iterable[Item] | None = None,
        *,
        path: str | Path | None = None,
        actor: int | None = None,
    ) -> list[Item]:
        """Replace the catalog with ``items`` or with the contents of a JSON file."""
        if items is None:
            source = path or self._economy.catalog_path
            if source is None:
                raise ValueError("No catalog file configured for reload")
            items = await asyncio.to_thread(load_catalog_file, source)
        reloaded = await self._engine.replace_catalog(items)
        audit_logger.info("reload_catalog actor=%s items=%s", actor, len(reloaded))
        return reloaded

    async def grant_currency(self, user_id: int, amount: int, *, actor: int | None = None) -> int:
        result = await self._engine.grant(user_id, amount)
        audit_logger.info("grant actor=%s user_id=%s amount=%s", actor, user_id, amount)
        return result.payload.balance

    async def reset_daily(self, user_id: int, *, actor: int | None = None) -> bool:
        cleared = await self._engine.reset_daily(user_id)
        audit_logger.info("reset_daily actor=%s user_id=%s cleared=%s", actor, user_id, cleared)
        return cleared
