"""FishForge economy engine public API."""

from .app import EconomyApp
from .config import FishForgeConfig
from .domain.economy import EconomyEngine

__all__ = [
    "EconomyApp",
    "EconomyEngine",
    "FishForgeConfig",
]
