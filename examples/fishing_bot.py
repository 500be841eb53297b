"""Пример бота-рыбалки: ежедневная награда, магазин и инвентарь на FishForge."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from fishforge import EconomyApp, FishForgeConfig
from fishforge.abstractions import SimpleBotConfig, run_simple_bot
from fishforge.domain.events import ITEM_BOUGHT

CATALOG_PATH = Path(__file__).with_name("catalog") / "fish.json"


async def announce_purchase(payload) -> None:
    logging.getLogger("fishing_bot").info(
        "Пользователь %s купил %s за %s монет.", payload["user_id"], payload["item"], payload["price"]
    )


async def demo() -> None:
    """Прогоняем несколько операций без Telegram."""
    app = EconomyApp(FishForgeConfig())
    app.event_bus.subscribe(ITEM_BOUGHT, announce_purchase)
    await app.init()

    print(await app.engine.claim_daily(1))
    print(await app.engine.buy(1, "fish 1"))
    print(await app.engine.sell(1, "Fish 1"))
    print(await app.engine.claim_daily(1))
    await app.shutdown()


async def run_bot() -> None:
    config = FishForgeConfig.from_env()
    await run_simple_bot(
        SimpleBotConfig(
            bot_token=config.bot_token,
            catalog_path=CATALOG_PATH,
            storage="data",
            admin_ids=tuple(config.admin.admin_ids),
        )
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_bot())
