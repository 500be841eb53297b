"""Validation utilities for FishForge applications."""

from __future__ import annotations

from .app import EconomyApp
from .domain.items import normalize_name


def validate_app(app: EconomyApp) -> list[str]:
    """Return list of validation errors discovered in a loaded app."""
    errors: list[str] = []

    items = app.catalog.all()
    if not items:
        errors.append("Catalog does not contain any items.")

    seen: set[str] = set()
    for item in items:
        if not item.name.strip():
            errors.append("Catalog contains an item with an empty name.")
        key = normalize_name(item.name)
        if key in seen:
            errors.append(f"Item '{item.name}' is defined multiple times.")
        seen.add(key)

    economy = app.config.economy
    if economy.daily_reward < 0:
        errors.append("Economy configuration 'daily_reward' cannot be negative.")
    if economy.daily_cooldown_seconds <= 0:
        errors.append("Economy configuration 'daily_cooldown_seconds' must be positive.")
    if economy.catalog_path is not None and not economy.catalog_path.exists():
        errors.append(f"Catalog file '{economy.catalog_path}' not found.")

    for account in app.accounts:
        if account.balance < 0:
            errors.append(f"Account {account.user_id} has negative balance {account.balance}.")

    return errors


__all__ = ["validate_app"]
