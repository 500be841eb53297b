"""Result values returned by the economy engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Generic, TypeVar, Union

from .items import Item

T = TypeVar("T")


class ErrorKind(str, Enum):
    ITEM_NOT_FOUND = "item_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NOT_YET_ELIGIBLE = "not_yet_eligible"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    payload: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    kind: ErrorKind
    detail: str = ""
    item_name: str | None = None
    required: int | None = None
    available: int | None = None
    remaining: timedelta | None = None

    @property
    def ok(self) -> bool:
        return False

    def remaining_parts(self) -> tuple[int, int]:
        """Split ``remaining`` into whole (hours, minutes) for display."""
        if self.remaining is None:
            return (0, 0)
        total_minutes = int(self.remaining.total_seconds()) // 60
        return divmod(total_minutes, 60)


Result = Union[Ok[T], Err]


@dataclass(frozen=True, slots=True)
class BalanceInfo:
    user_id: int
    balance: int


@dataclass(frozen=True, slots=True)
class DailyReward:
    user_id: int
    amount: int
    balance: int
    next_claim_at: datetime


@dataclass(frozen=True, slots=True)
class Purchase:
    user_id: int
    item: Item
    balance: int


@dataclass(frozen=True, slots=True)
class Sale:
    user_id: int
    item: Item
    payout: int
    balance: int


@dataclass(frozen=True, slots=True)
class InventoryView:
    user_id: int
    balance: int
    items: tuple[Item, ...] = field(default_factory=tuple)

    def counts(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for item in self.items:
            totals[item.name] = totals.get(item.name, 0) + 1
        return totals
