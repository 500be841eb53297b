"""Catalog item models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .exceptions import ItemNotFound


@dataclass(frozen=True, slots=True)
class Item:
    """Definition of a purchasable item.

    Instances are immutable, so an inventory entry keeps the values it was
    bought with even after the catalog is reloaded.
    """

    name: str
    rarity: int = 1
    price: int = 0

    def __post_init__(self) -> None:
        if self.rarity <= 0:
            raise ValueError(f"Item '{self.name}' has invalid rarity {self.rarity}")
        if self.price < 0:
            raise ValueError(f"Item '{self.name}' has negative price {self.price}")

    @property
    def key(self) -> str:
        return normalize_name(self.name)


DEFAULT_ITEMS: tuple[Item, ...] = (
    Item(name="Fish 1", rarity=1, price=10),
    Item(name="Fish 2", rarity=1, price=10),
)


def normalize_name(name: str) -> str:
    return name.strip().casefold()


class ItemCatalog:
    """Ordered registry of items keyed by case-insensitive name."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: dict[str, Item] = {}
        self.replace(items)

    def replace(self, items: Iterable[Item]) -> None:
        """Swap the whole catalog in one step (administrative reload)."""
        staged: dict[str, Item] = {}
        for item in items:
            if item.key in staged:
                raise ValueError(f"Item {item.name} already registered")
            staged[item.key] = item
        self._items = staged

    def get(self, name: str) -> Item | None:
        return self._items.get(normalize_name(name))

    def find_by_name(self, name: str) -> Item:
        item = self.get(name)
        if item is None:
            raise ItemNotFound(name)
        return item

    def all(self) -> list[Item]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._items
