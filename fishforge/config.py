"""Configuration models for FishForge."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Literal

StorageBackend = Literal["memory", "json", "sqlalchemy"]
SellPricePolicyName = Literal["current", "purchase"]

_BACKENDS = ("memory", "json", "sqlalchemy")
_POLICIES = ("current", "purchase")
_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure where the catalog, account and cooldown snapshots live."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    data_dir: Path = Path("./data")
    echo_sql: bool = False

    def __post_init__(self) -> None:
        if self.backend not in _BACKENDS:
            raise ValueError(f"Unsupported storage backend {self.backend}")
        self.data_dir = Path(self.data_dir)

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./fishforge.db"
        return None


@dataclass(slots=True)
class EconomyConfig:
    """Reward and pricing rules."""

    daily_reward: int = 100
    daily_cooldown_seconds: int = 12 * 60 * 60
    sell_price_policy: SellPricePolicyName = "current"
    catalog_path: Path | None = None

    def __post_init__(self) -> None:
        if self.daily_reward < 0:
            raise ValueError("daily_reward cannot be negative")
        if self.daily_cooldown_seconds <= 0:
            raise ValueError("daily_cooldown_seconds must be positive")
        if self.sell_price_policy not in _POLICIES:
            raise ValueError(f"Unknown sell price policy '{self.sell_price_policy}'")
        if self.catalog_path is not None:
            self.catalog_path = Path(self.catalog_path)

    @property
    def daily_cooldown(self) -> timedelta:
        return timedelta(seconds=self.daily_cooldown_seconds)


@dataclass(slots=True)
class AdminCommandConfig:
    """Allows renaming admin bot commands."""

    reload_catalog: str = "reloadcatalog"
    grant: str = "grant"
    reset_daily: str = "resetdaily"


@dataclass(slots=True)
class AdminConfig:
    admin_ids: set[int] = field(default_factory=set)
    commands: AdminCommandConfig = field(default_factory=AdminCommandConfig)


@dataclass(slots=True)
class FishForgeConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "FishForgeConfig":
        """Create config from environment variables prefixed with FISHFORGE_."""
        prefix = "FISHFORGE_"

        storage = StorageConfig(
            backend=os.getenv(f"{prefix}STORAGE_BACKEND", "memory"),  # type: ignore[arg-type]
            dsn=os.getenv(f"{prefix}STORAGE_DSN") or None,
            data_dir=Path(os.getenv(f"{prefix}STORAGE_DATA_DIR", "./data")),
            echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
        )

        catalog_path = os.getenv(f"{prefix}CATALOG_PATH")
        economy = EconomyConfig(
            daily_reward=_int_env(f"{prefix}DAILY_REWARD", 100),
            daily_cooldown_seconds=_int_env(f"{prefix}DAILY_COOLDOWN", 12 * 60 * 60),
            sell_price_policy=os.getenv(f"{prefix}SELL_PRICE_POLICY", "current"),  # type: ignore[arg-type]
            catalog_path=Path(catalog_path) if catalog_path else None,
        )

        admin = AdminConfig(
            admin_ids={
                int(_id.strip())
                for _id in os.getenv(f"{prefix}ADMIN_IDS", "").split(",")
                if _id.strip()
            },
            commands=AdminCommandConfig(
                reload_catalog=os.getenv(f"{prefix}ADMIN_CMD_RELOAD_CATALOG") or "reloadcatalog",
                grant=os.getenv(f"{prefix}ADMIN_CMD_GRANT") or "grant",
                reset_daily=os.getenv(f"{prefix}ADMIN_CMD_RESET_DAILY") or "resetdaily",
            ),
        )

        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            storage=storage,
            economy=economy,
            admin=admin,
            log_level=os.getenv(f"{prefix}LOG_LEVEL", "INFO").upper(),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from exc
