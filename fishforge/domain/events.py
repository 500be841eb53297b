"""Inbound request events and outbound domain event dispatch."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, DefaultDict, Mapping, Union

EventListener = Callable[[Mapping[str, Any]], Awaitable[None]]

DAILY_CLAIMED = "economy.daily.claimed"
ITEM_BOUGHT = "economy.item.bought"
ITEM_SOLD = "economy.item.sold"
MEMBER_REGISTERED = "economy.member.registered"
CATALOG_RELOADED = "admin.catalog.reloaded"
CURRENCY_GRANTED = "admin.currency.granted"
DAILY_RESET = "admin.daily.reset"


@dataclass(frozen=True, slots=True)
class MemberJoined:
    user_id: int


@dataclass(frozen=True, slots=True)
class BalanceRequested:
    user_id: int


@dataclass(frozen=True, slots=True)
class DailyClaimRequested:
    user_id: int


@dataclass(frozen=True, slots=True)
class BuyRequested:
    user_id: int
    item_name: str


@dataclass(frozen=True, slots=True)
class SellRequested:
    user_id: int
    item_name: str


@dataclass(frozen=True, slots=True)
class InventoryRequested:
    user_id: int


InboundEvent = Union[
    MemberJoined,
    BalanceRequested,
    DailyClaimRequested,
    BuyRequested,
    SellRequested,
    InventoryRequested,
]


class EventBus:
    """Simple async pub-sub for domain notifications."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    async def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        for listener in list(self._listeners.get(event_name, ())):
            await listener(payload)
