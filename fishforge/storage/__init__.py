"""Storage backends for FishForge."""

from .base import ACCOUNTS, CATALOG, COOLDOWNS, PersistenceGateway, SnapshotResource
from .json_files import JsonFileSnapshot, json_gateway
from .memory import InMemorySnapshot, memory_gateway
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "ACCOUNTS",
    "CATALOG",
    "COOLDOWNS",
    "PersistenceGateway",
    "SnapshotResource",
    "JsonFileSnapshot",
    "json_gateway",
    "InMemorySnapshot",
    "memory_gateway",
    "AsyncSQLAlchemyStorage",
]
