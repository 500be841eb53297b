"""Economy engine: balance, daily reward, buy and sell transactions."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping

from ..loaders.snapshots import dump_accounts, dump_catalog, dump_cooldowns
from ..storage.base import ACCOUNTS, CATALOG, COOLDOWNS, RESOURCE_NAMES, PersistenceGateway
from .accounts import AccountStore
from .cooldowns import CooldownTracker, as_utc
from .events import (
    CATALOG_RELOADED,
    CURRENCY_GRANTED,
    DAILY_CLAIMED,
    DAILY_RESET,
    ITEM_BOUGHT,
    ITEM_SOLD,
    MEMBER_REGISTERED,
    EventBus,
)
from .exceptions import InsufficientFunds, ItemNotFound
from .items import Item, ItemCatalog
from .locks import UserLocks
from .pricing import CurrentPricePolicy, SellPricePolicy
from .results import (
    BalanceInfo,
    DailyReward,
    Err,
    ErrorKind,
    InventoryView,
    Ok,
    Purchase,
    Result,
    Sale,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_DAILY_REWARD = 100
DEFAULT_DAILY_COOLDOWN = timedelta(hours=12)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EconomyEngine:
    """Run player operations as atomic per-user transactions.

    Each operation holds the user's lock for its whole check-then-mutate
    sequence, releases it, and only then flushes the touched snapshots.
    Failures come back as :class:`Err` values; nothing in the domain
    taxonomy is raised to the caller.
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        accounts: AccountStore,
        cooldowns: CooldownTracker,
        gateway: PersistenceGateway,
        *,
        daily_reward: int = DEFAULT_DAILY_REWARD,
        sell_policy: SellPricePolicy | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        locks: UserLocks | None = None,
    ) -> None:
        if daily_reward < 0:
            raise ValueError("Daily reward cannot be negative")
        self.catalog = catalog
        self.accounts = accounts
        self.cooldowns = cooldowns
        self.gateway = gateway
        self.daily_reward = daily_reward
        self.sell_policy = sell_policy or CurrentPricePolicy()
        self.events = event_bus or EventBus()
        self.locks = locks or UserLocks()
        self._clock = clock or utcnow
        self._flush_lock = asyncio.Lock()
        self.flush_failures = 0

    async def get_balance(self, user_id: int) -> Result[BalanceInfo]:
        async with self.locks.for_user(user_id):
            created = not self.accounts.exists(user_id)
            account = self.accounts.get_or_create(user_id)
            info = BalanceInfo(user_id=user_id, balance=account.balance)
        if created:
            await self._flush(ACCOUNTS)
        return Ok(info)

    async def claim_daily(self, user_id: int, now: datetime | None = None) -> Result[DailyReward]:
        now = as_utc(now or self._clock())
        async with self.locks.for_user(user_id):
            remaining = self.cooldowns.time_remaining(user_id, now)
            if remaining > timedelta(0):
                logger.debug("User %s daily claim rejected, %s remaining.", user_id, remaining)
                return Err(
                    ErrorKind.NOT_YET_ELIGIBLE,
                    detail="Daily reward already claimed",
                    remaining=remaining,
                )
            balance = self.accounts.credit(user_id, self.daily_reward)
            self.cooldowns.record_claim(user_id, now)
            reward = DailyReward(
                user_id=user_id,
                amount=self.daily_reward,
                balance=balance,
                next_claim_at=now + self.cooldowns.period,
            )

        logger.info("User %s claimed daily reward of %s (balance %s).", user_id, reward.amount, balance)
        # Cooldowns first: a crash between the writes loses the reward instead of allowing a second claim.
        await self._flush(COOLDOWNS, ACCOUNTS)
        await self._notify(DAILY_CLAIMED, {"user_id": user_id, "amount": reward.amount})
        return Ok(reward)

    async def buy(self, user_id: int, item_name: str) -> Result[Purchase]:
        async with self.locks.for_user(user_id):
            try:
                item = self.catalog.find_by_name(item_name)
                balance = self.accounts.debit(user_id, item.price)
                self.accounts.add_to_inventory(user_id, item)
            except ItemNotFound as exc:
                logger.debug("User %s tried to buy unknown item '%s'.", user_id, item_name)
                return _item_not_found(exc)
            except InsufficientFunds as exc:
                logger.debug("User %s cannot afford '%s': %s.", user_id, item_name, exc)
                return Err(
                    ErrorKind.INSUFFICIENT_FUNDS,
                    detail=str(exc),
                    item_name=item_name,
                    required=exc.required,
                    available=exc.available,
                )
            purchase = Purchase(user_id=user_id, item=item, balance=balance)

        logger.info("User %s bought '%s' for %s (balance %s).", user_id, item.name, item.price, balance)
        await self._flush(ACCOUNTS)
        await self._notify(ITEM_BOUGHT, {"user_id": user_id, "item": item.name, "price": item.price})
        return Ok(purchase)

    async def sell(self, user_id: int, item_name: str) -> Result[Sale]:
        async with self.locks.for_user(user_id):
            try:
                entry = self.accounts.find_in_inventory(user_id, item_name)
            except ItemNotFound as exc:
                logger.debug("User %s tried to sell '%s' they do not own.", user_id, item_name)
                return _item_not_found(exc)
            payout = self.sell_policy.payout(entry, self.catalog)
            balance = self.accounts.credit(user_id, payout)
            self.accounts.remove_from_inventory(user_id, entry.name)
            sale = Sale(user_id=user_id, item=entry, payout=payout, balance=balance)

        logger.info("User %s sold '%s' for %s (balance %s).", user_id, entry.name, payout, balance)
        await self._flush(ACCOUNTS)
        await self._notify(ITEM_SOLD, {"user_id": user_id, "item": entry.name, "payout": payout})
        return Ok(sale)

    async def inventory(self, user_id: int) -> Result[InventoryView]:
        async with self.locks.for_user(user_id):
            account = self.accounts.get_or_create(user_id)
            return Ok(
                InventoryView(
                    user_id=user_id,
                    balance=account.balance,
                    items=tuple(account.inventory),
                )
            )

    async def register_member(self, user_id: int) -> Result[BalanceInfo]:
        """Create the account eagerly when a user joins."""
        async with self.locks.for_user(user_id):
            created = not self.accounts.exists(user_id)
            account = self.accounts.get_or_create(user_id)
            info = BalanceInfo(user_id=user_id, balance=account.balance)
        if created:
            logger.info("Registered account for user %s.", user_id)
            await self._flush(ACCOUNTS)
            await self._notify(MEMBER_REGISTERED, {"user_id": user_id})
        return Ok(info)

    async def grant(self, user_id: int, amount: int) -> Result[BalanceInfo]:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        async with self.locks.for_user(user_id):
            balance = self.accounts.credit(user_id, amount)
        logger.info("Granted %s to user %s (balance %s).", amount, user_id, balance)
        await self._flush(ACCOUNTS)
        await self._notify(CURRENCY_GRANTED, {"user_id": user_id, "amount": amount})
        return Ok(BalanceInfo(user_id=user_id, balance=balance))

    async def reset_daily(self, user_id: int) -> bool:
        async with self.locks.for_user(user_id):
            cleared = self.cooldowns.clear(user_id)
        if cleared:
            logger.info("Daily cooldown reset for user %s.", user_id)
            await self._flush(COOLDOWNS)
            await self._notify(DAILY_RESET, {"user_id": user_id})
        return cleared

    async def replace_catalog(self, items: Iterable[Item]) -> list[Item]:
        """Administrative reload; already purchased entries keep their values."""
        self.catalog.replace(items)
        current = self.catalog.all()
        logger.info("Catalog reloaded with %s items.", len(current))
        await self._flush(CATALOG)
        await self._notify(CATALOG_RELOADED, {"items": [item.name for item in current]})
        return current

    async def flush(self) -> bool:
        return await self._flush(*RESOURCE_NAMES)

    async def _flush(self, *names: str) -> bool:
        async with self._flush_lock:
            # Dump everything before the first await so the snapshot is consistent.
            payloads = [(name, self._dump(name)) for name in names]
            ok = True
            for name, payload in payloads:
                try:
                    await self.gateway.resource(name).save(payload)
                except Exception:  # noqa: BLE001 - in-memory state stands
                    ok = False
                    self.flush_failures += 1
                    logger.exception("Failed to persist '%s' snapshot.", name)
            return ok

    def _dump(self, name: str) -> Any:
        if name == CATALOG:
            return dump_catalog(self.catalog.all())
        if name == ACCOUNTS:
            return dump_accounts(self.accounts)
        if name == COOLDOWNS:
            return dump_cooldowns(self.cooldowns)
        raise KeyError(f"Unknown snapshot resource {name}")

    async def _notify(self, event_name: str, payload: Mapping[str, Any]) -> None:
        try:
            await self.events.publish(event_name, payload)
        except Exception:  # noqa: BLE001
            logger.exception("Listener for '%s' failed.", event_name)


def _item_not_found(exc: ItemNotFound) -> Err:
    return Err(ErrorKind.ITEM_NOT_FOUND, detail=str(exc), item_name=exc.item_name)
