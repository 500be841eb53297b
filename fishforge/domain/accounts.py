"""Account state and the store that owns balance/inventory mutation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .exceptions import InsufficientFunds, ItemNotFound
from .items import Item, normalize_name


@dataclass(slots=True)
class Account:
    user_id: int
    balance: int = 0
    inventory: list[Item] = field(default_factory=list)


class AccountStore:
    """In-memory mapping of user id to account.

    Every method runs without yielding to the event loop, so each call is
    atomic on its own. Check-then-mutate sequences spanning several calls
    must hold the user's lock from :class:`~fishforge.domain.locks.UserLocks`.
    """

    def __init__(self, accounts: dict[int, Account] | None = None) -> None:
        self._accounts: dict[int, Account] = dict(accounts or {})

    def get_or_create(self, user_id: int) -> Account:
        """Return the account for ``user_id``, creating an empty one if unseen."""
        account = self._accounts.get(user_id)
        if account is None:
            account = Account(user_id=user_id)
            self._accounts[user_id] = account
        return account

    def exists(self, user_id: int) -> bool:
        return user_id in self._accounts

    def credit(self, user_id: int, amount: int) -> int:
        if amount < 0:
            raise ValueError("Cannot credit negative amount")
        account = self.get_or_create(user_id)
        account.balance += amount
        return account.balance

    def debit(self, user_id: int, amount: int) -> int:
        if amount < 0:
            raise ValueError("Cannot debit negative amount")
        available = self._accounts[user_id].balance if user_id in self._accounts else 0
        if available < amount:
            raise InsufficientFunds(required=amount, available=available)
        account = self.get_or_create(user_id)
        account.balance -= amount
        return account.balance

    def add_to_inventory(self, user_id: int, item: Item) -> None:
        self.get_or_create(user_id).inventory.append(item)

    def find_in_inventory(self, user_id: int, item_name: str) -> Item:
        key = normalize_name(item_name)
        account = self._accounts.get(user_id)
        for entry in account.inventory if account else ():
            if entry.key == key:
                return entry
        raise ItemNotFound(item_name, where="inventory")

    def remove_from_inventory(self, user_id: int, item_name: str) -> Item:
        """Remove the first entry matching ``item_name`` and return it."""
        inventory = self.get_or_create(user_id).inventory
        key = normalize_name(item_name)
        for index, entry in enumerate(inventory):
            if entry.key == key:
                return inventory.pop(index)
        raise ItemNotFound(item_name, where="inventory")

    def replace(self, accounts: dict[int, Account]) -> None:
        self._accounts = dict(accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts.values()))

    def __len__(self) -> int:
        return len(self._accounts)
