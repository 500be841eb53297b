"""Testing utilities for FishForge."""

from .clock import ManualClock
from .factory import ItemFactory
from .fixtures import TEST_ITEMS, app_fixture, manual_clock, memory_app

__all__ = [
    "ManualClock",
    "ItemFactory",
    "TEST_ITEMS",
    "app_fixture",
    "manual_clock",
    "memory_app",
]
