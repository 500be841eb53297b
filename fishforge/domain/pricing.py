"""Strategies deciding how much a sold item pays out."""

from __future__ import annotations

import logging
from typing import Protocol

from .items import Item, ItemCatalog

logger = logging.getLogger(__name__)


class SellPricePolicy(Protocol):
    name: str

    def payout(self, entry: Item, catalog: ItemCatalog) -> int:
        ...


class CurrentPricePolicy:
    """Pay the catalog's price at the moment of sale.

    Falls back to the recorded price when the item has been removed from
    the catalog since it was bought.
    """

    name = "current"

    def payout(self, entry: Item, catalog: ItemCatalog) -> int:
        current = catalog.get(entry.name)
        if current is None:
            logger.warning(
                "Item '%s' is no longer in the catalog; paying recorded price %s.",
                entry.name,
                entry.price,
            )
            return entry.price
        return current.price


class PurchasePricePolicy:
    """Pay back exactly what the inventory entry was bought for."""

    name = "purchase"

    def payout(self, entry: Item, catalog: ItemCatalog) -> int:
        return entry.price


SELL_PRICE_POLICIES: dict[str, type[CurrentPricePolicy] | type[PurchasePricePolicy]] = {
    CurrentPricePolicy.name: CurrentPricePolicy,
    PurchasePricePolicy.name: PurchasePricePolicy,
}


def policy_for(name: str) -> SellPricePolicy:
    try:
        return SELL_PRICE_POLICIES[name]()
    except KeyError as exc:
        raise ValueError(f"Unknown sell price policy '{name}'") from exc
