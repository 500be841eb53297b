"""Encode and decode the catalog, account and cooldown snapshots.

Snapshots are plain JSON-compatible structures. Parsing also accepts the
PascalCase keys written by earlier releases of the bot (``Name``, ``FishInventory``,
``LastClaimed`` and so on) so existing data files load unchanged.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..domain.accounts import Account
from ..domain.cooldowns import CooldownRecord, as_utc
from ..domain.items import Item, normalize_name

_FRACTION = re.compile(r"(\.\d{6})\d+")


def _field(entry: Mapping[str, Any], name: str, legacy: str, default: Any = None) -> Any:
    if name in entry:
        return entry[name]
    return entry.get(legacy, default)


def parse_item(entry: Mapping[str, Any]) -> Item:
    return Item(
        name=str(_field(entry, "name", "Name")),
        rarity=int(_field(entry, "rarity", "Rarity", 1)),
        price=int(_field(entry, "price", "Price", 0)),
    )


def dump_item(item: Item) -> dict[str, Any]:
    return {"name": item.name, "rarity": item.rarity, "price": item.price}


def validate_catalog_data(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, list) or not data:
        return ["Catalog must be a non-empty array of items."]

    seen: set[str] = set()
    for idx, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Item #{idx} must be an object.")
            continue
        name = _field(entry, "name", "Name")
        if not isinstance(name, str) or not name.strip():
            errors.append(f"Item #{idx} must define non-empty 'name'.")
            continue
        key = normalize_name(name)
        if key in seen:
            errors.append(f"Item name '{name}' defined multiple times.")
        seen.add(key)

        rarity = _field(entry, "rarity", "Rarity", 1)
        if not isinstance(rarity, int) or isinstance(rarity, bool) or rarity <= 0:
            errors.append(f"Item '{name}' has invalid 'rarity' value '{rarity}'.")

        price = _field(entry, "price", "Price")
        if not isinstance(price, int) or isinstance(price, bool) or price < 0:
            errors.append(f"Item '{name}' must define non-negative integer 'price'.")
    return errors


def parse_catalog(data: Any) -> tuple[Item, ...]:
    errors = validate_catalog_data(data)
    if errors:
        raise ValueError(_format_errors("Catalog validation failed", errors))
    return tuple(parse_item(entry) for entry in data)


def dump_catalog(items: Iterable[Item]) -> list[dict[str, Any]]:
    return [dump_item(item) for item in items]


def parse_accounts(data: Mapping[str, Any]) -> dict[int, Account]:
    if not isinstance(data, Mapping):
        raise ValueError("Accounts snapshot must be an object keyed by user id.")
    accounts: dict[int, Account] = {}
    for key, entry in data.items():
        user_id = int(_field(entry, "id", "Id", key))
        balance = int(_field(entry, "balance", "Balance", 0))
        if balance < 0:
            raise ValueError(f"Account {user_id} has negative balance {balance}.")
        inventory = _field(entry, "inventory", "FishInventory") or []
        accounts[user_id] = Account(
            user_id=user_id,
            balance=balance,
            inventory=[parse_item(item) for item in inventory],
        )
    return accounts


def dump_accounts(accounts: Iterable[Account]) -> dict[str, Any]:
    return {
        str(account.user_id): {
            "id": account.user_id,
            "balance": account.balance,
            "inventory": [dump_item(item) for item in account.inventory],
        }
        for account in accounts
    }


def parse_timestamp(raw: str) -> datetime:
    # .NET writes seven fractional digits; datetime accepts at most six.
    text = _FRACTION.sub(r"\1", raw.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def parse_cooldowns(data: Any) -> dict[int, CooldownRecord]:
    if isinstance(data, Mapping):
        entries: Iterable[Any] = (
            {"user_id": key, "last_claimed": value} for key, value in data.items()
        )
    elif isinstance(data, list):
        entries = data
    else:
        raise ValueError("Cooldowns snapshot must be an array or an object.")

    records: dict[int, CooldownRecord] = {}
    for entry in entries:
        user_id = int(_field(entry, "user_id", "UserId"))
        raw = _field(entry, "last_claimed", "LastClaimed")
        if not raw:
            continue
        records[user_id] = CooldownRecord(user_id=user_id, last_claimed_at=parse_timestamp(raw))
    return records


def dump_cooldowns(records: Iterable[CooldownRecord]) -> list[dict[str, Any]]:
    return [
        {"user_id": record.user_id, "last_claimed": record.last_claimed_at.isoformat()}
        for record in records
    ]


def load_catalog_file(path: str | Path) -> tuple[Item, ...]:
    """Read and validate a catalog JSON file."""
    return parse_catalog(json.loads(Path(path).read_text(encoding="utf-8")))


def validate_catalog_file(path: str | Path) -> list[str]:
    """Validate catalog JSON file and return a list of errors."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return validate_catalog_data(data)


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
