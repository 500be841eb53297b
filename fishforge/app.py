"""Top level application object for FishForge bots."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .config import FishForgeConfig
from .domain.accounts import AccountStore
from .domain.cooldowns import CooldownTracker
from .domain.economy import Clock, EconomyEngine
from .domain.events import (
    BalanceRequested,
    BuyRequested,
    DailyClaimRequested,
    EventBus,
    InboundEvent,
    InventoryRequested,
    MemberJoined,
    SellRequested,
)
from .domain.items import DEFAULT_ITEMS, Item, ItemCatalog
from .domain.pricing import SellPricePolicy, policy_for
from .domain.results import Result
from .loaders.snapshots import (
    dump_accounts,
    dump_catalog,
    dump_cooldowns,
    parse_accounts,
    parse_catalog,
    parse_cooldowns,
)
from .storage.base import PersistenceGateway
from .storage.json_files import json_gateway
from .storage.memory import memory_gateway
from .storage.sqlalchemy import AsyncSQLAlchemyStorage

logger = logging.getLogger(__name__)


class EconomyApp:
    """Central dependency container owning one engine and its state.

    ``init`` restores the three snapshots (seeding defaults when a snapshot
    is absent) and ``shutdown`` flushes them back.
    """

    def __init__(
        self,
        config: FishForgeConfig,
        *,
        gateway: PersistenceGateway | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        sell_policy: SellPricePolicy | None = None,
        default_items: Iterable[Item] = DEFAULT_ITEMS,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.default_items = tuple(default_items)

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.gateway = gateway or self._wire_storage()

        self.catalog = ItemCatalog()
        self.accounts = AccountStore()
        self.cooldowns = CooldownTracker(config.economy.daily_cooldown)
        self.engine = EconomyEngine(
            catalog=self.catalog,
            accounts=self.accounts,
            cooldowns=self.cooldowns,
            gateway=self.gateway,
            daily_reward=config.economy.daily_reward,
            sell_policy=sell_policy or policy_for(config.economy.sell_price_policy),
            event_bus=self.event_bus,
            clock=clock,
        )
        self._initialized = False

    def _wire_storage(self) -> PersistenceGateway:
        storage = self.config.storage
        if storage.backend == "memory":
            return memory_gateway()
        if storage.backend == "json":
            return json_gateway(storage.data_dir)
        if storage.backend == "sqlalchemy":
            dsn = storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            self._sqlalchemy_storage = AsyncSQLAlchemyStorage(dsn, echo=storage.echo_sql)
            return self._sqlalchemy_storage.gateway()
        raise ValueError(f"Unsupported storage backend {storage.backend}")

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        """Load snapshots, seeding and persisting defaults for absent ones."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

        catalog_data = await self.gateway.catalog.load()
        if catalog_data is None:
            self.catalog.replace(self.default_items)
            await self.gateway.catalog.save(dump_catalog(self.catalog.all()))
            logger.info("Seeded default catalog with %s items.", len(self.catalog))
        else:
            self.catalog.replace(parse_catalog(catalog_data))

        accounts_data = await self.gateway.accounts.load()
        if accounts_data is None:
            self.accounts.replace({})
            await self.gateway.accounts.save(dump_accounts(self.accounts))
        else:
            self.accounts.replace(parse_accounts(accounts_data))

        cooldowns_data = await self.gateway.cooldowns.load()
        if cooldowns_data is None:
            self.cooldowns.replace({})
            await self.gateway.cooldowns.save(dump_cooldowns(self.cooldowns))
        else:
            self.cooldowns.replace(parse_cooldowns(cooldowns_data))

        self._initialized = True
        logger.info(
            "Economy loaded: %s items, %s accounts, %s cooldowns.",
            len(self.catalog),
            len(self.accounts),
            len(self.cooldowns),
        )

    async def shutdown(self) -> None:
        if self._initialized:
            await self.engine.flush()
        await self.gateway.close()
        self._initialized = False

    async def dispatch(self, event: InboundEvent) -> Result[Any]:
        """Route one inbound event to the matching engine operation."""
        engine = self.engine
        if isinstance(event, MemberJoined):
            return await engine.register_member(event.user_id)
        if isinstance(event, BalanceRequested):
            return await engine.get_balance(event.user_id)
        if isinstance(event, DailyClaimRequested):
            return await engine.claim_daily(event.user_id)
        if isinstance(event, BuyRequested):
            return await engine.buy(event.user_id, event.item_name)
        if isinstance(event, SellRequested):
            return await engine.sell(event.user_id, event.item_name)
        if isinstance(event, InventoryRequested):
            return await engine.inventory(event.user_id)
        raise TypeError(f"Unsupported event {type(event).__name__}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "items": [item.name for item in self.catalog.all()],
            "accounts": len(self.accounts),
            "cooldowns": len(self.cooldowns),
            "daily_reward": self.engine.daily_reward,
            "sell_price_policy": self.engine.sell_policy.name,
        }
