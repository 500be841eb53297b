"""Pytest fixtures for FishForge."""

from __future__ import annotations

from typing import AsyncIterator

import pytest
import pytest_asyncio

from ..app import EconomyApp
from ..config import FishForgeConfig
from ..domain.items import Item
from ..storage.memory import memory_gateway
from .clock import ManualClock

TEST_ITEMS = (
    Item(name="Carp", rarity=1, price=10),
    Item(name="Pike", rarity=2, price=25),
    Item(name="Golden Trout", rarity=5, price=100),
)


@pytest.fixture()
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest_asyncio.fixture()
async def memory_app(manual_clock: ManualClock) -> AsyncIterator[EconomyApp]:
    app = app_fixture(clock=manual_clock)
    await app.init()
    yield app
    await app.shutdown()


def app_fixture(
    bot_token: str = "test",
    *,
    config: FishForgeConfig | None = None,
    items=TEST_ITEMS,
    **kwargs,
) -> EconomyApp:
    """Helper for ad-hoc tests where pytest is not available."""
    kwargs.setdefault("gateway", memory_gateway())
    return EconomyApp(config or FishForgeConfig(bot_token=bot_token), default_items=items, **kwargs)
