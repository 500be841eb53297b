"""Snapshot and catalog loading helpers."""

from .snapshots import (
    dump_accounts,
    dump_catalog,
    dump_cooldowns,
    load_catalog_file,
    parse_accounts,
    parse_catalog,
    parse_cooldowns,
    validate_catalog_data,
    validate_catalog_file,
)

__all__ = [
    "dump_accounts",
    "dump_catalog",
    "dump_cooldowns",
    "load_catalog_file",
    "parse_accounts",
    "parse_catalog",
    "parse_cooldowns",
    "validate_catalog_data",
    "validate_catalog_file",
]
