"""High-level helpers that simplify bootstrapping FishForge bots.

This module provides a straightforward, batteries-included API oriented towards
developers who do not want to dive into the full async/config ecosystem.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from aiogram import Bot, Dispatcher
from rich.console import Console

from .admin import AdminService, build_admin_router
from .app import EconomyApp
from .config import FishForgeConfig
from .loaders.snapshots import validate_catalog_data
from .telegram import build_router

console = Console()


@dataclass(slots=True)
class SimpleBotConfig:
    """Minimal settings required to run a FishForge bot."""

    bot_token: str
    catalog_path: Path | None = None
    # None keeps FISHFORGE_STORAGE_*; otherwise "memory", a JSON directory or a *.db SQLite file.
    storage: str | None = None
    admin_ids: Sequence[int] = ()


def build_config(config: SimpleBotConfig) -> FishForgeConfig:
    forge_config = FishForgeConfig.from_env()
    forge_config.bot_token = config.bot_token
    if config.storage == "memory":
        forge_config.storage.backend = "memory"
    elif config.storage:
        target = Path(config.storage).expanduser().resolve()
        if target.suffix in {".db", ".sqlite", ".sqlite3"}:
            target.parent.mkdir(parents=True, exist_ok=True)
            forge_config.storage.backend = "sqlalchemy"
            forge_config.storage.dsn = f"sqlite+aiosqlite:///{target.as_posix()}"
        else:
            forge_config.storage.backend = "json"
            forge_config.storage.data_dir = target
    if config.catalog_path:
        forge_config.economy.catalog_path = Path(config.catalog_path)
    if config.admin_ids:
        forge_config.admin.admin_ids = set(config.admin_ids)
    return forge_config


async def run_simple_bot(config: SimpleBotConfig) -> None:
    """Spin up a ready-to-go aiogram bot with sensible defaults."""

    app = EconomyApp(build_config(config))
    await app.init()
    if app.config.economy.catalog_path:
        await AdminService(app.engine, app.config.economy).reload_catalog()

    bot = Bot(app.config.bot_token)
    dp = Dispatcher()
    dp.include_router(build_admin_router(app))
    dp.include_router(build_router(app))

    console.print(
        f"[bold green]FishForge ready![/bold green]\n"
        f"Items: {len(app.catalog)}, accounts: {len(app.accounts)}, "
        f"storage: {app.config.storage.backend}",
    )

    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await app.shutdown()
        await bot.session.close()


def run_simple_bot_sync(config: SimpleBotConfig) -> None:
    """Synchronous wrapper for run_simple_bot."""

    asyncio.run(run_simple_bot(config))


@dataclass(slots=True)
class CatalogBuilder:
    """Imperative builder that produces JSON catalogs."""

    items: list[dict] = field(default_factory=list)

    def add_item(self, name: str, price: int, *, rarity: int = 1) -> "CatalogBuilder":
        self.items.append({"name": name, "rarity": rarity, "price": price})
        return self

    def build(self) -> list[dict]:
        errors = validate_catalog_data(self.items)
        if errors:
            raise ValueError("Catalog validation failed:\n" + "\n".join(f"- {err}" for err in errors))
        return [dict(item) for item in self.items]

    def save(self, path: Path) -> None:
        catalog = self.build()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(catalog, ensure_ascii=False, indent=2), encoding="utf-8")


__all__ = [
    "SimpleBotConfig",
    "CatalogBuilder",
    "build_config",
    "run_simple_bot",
    "run_simple_bot_sync",
]
