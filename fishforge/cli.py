"""Command line helpers for FishForge."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .abstractions import SimpleBotConfig, run_simple_bot_sync
from .app import EconomyApp
from .config import FishForgeConfig
from .diagnostics.economy_simulator import EconomySimulator
from .loaders import load_catalog_file, validate_catalog_file
from .validators import validate_app

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def run_bot() -> None:
    parser = argparse.ArgumentParser(description="Run the FishForge Telegram bot")
    parser.add_argument("--catalog", help="Catalog JSON file applied on startup")
    parser.add_argument(
        "--storage",
        default=None,
        help="'memory', a directory for JSON snapshots, or a *.db SQLite file",
    )
    args = parser.parse_args()

    config = FishForgeConfig.from_env()
    configure_logging(config.log_level)
    if not config.bot_token:
        console.print("[red]FISHFORGE_BOT_TOKEN is not set.[/red]")
        sys.exit(1)

    run_simple_bot_sync(
        SimpleBotConfig(
            bot_token=config.bot_token,
            catalog_path=Path(args.catalog) if args.catalog else config.economy.catalog_path,
            storage=args.storage,
            admin_ids=tuple(config.admin.admin_ids),
        )
    )


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="FishForge validator")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--catalog", help="Path to catalog JSON file for validation")
    group.add_argument(
        "--env",
        action="store_true",
        help="Load the economy configured by FISHFORGE_* variables and validate it",
    )
    args = parser.parse_args()

    if args.catalog:
        errors = validate_catalog_file(Path(args.catalog))
        if errors:
            console.print("[red]Catalog errors:[/red]")
            for err in errors:
                console.print(f"- {err}")
            sys.exit(1)
        console.print("Catalog is valid ✅")
        return

    config = FishForgeConfig.from_env()
    configure_logging(config.log_level)
    issues = asyncio.run(_validate_env(config))
    if issues:
        console.print("[red]Configuration errors:[/red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("Economy configuration is valid ✅")


async def _validate_env(config: FishForgeConfig) -> list[str]:
    app = EconomyApp(config)
    await app.init()
    try:
        return validate_app(app)
    finally:
        await app.gateway.close()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="FishForge economy simulator")
    parser.add_argument("--catalog", help="Catalog JSON file to simulate against")
    parser.add_argument("--operations", type=int, default=1000, help="Number of operations")
    parser.add_argument("--users", type=int, default=3, help="Number of simulated users")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    config = FishForgeConfig.from_env()
    kwargs = {"items": load_catalog_file(args.catalog)} if args.catalog else {}
    simulator = EconomySimulator(config, rng=Random(args.seed), **kwargs)
    result = asyncio.run(simulator.simulate(operations=args.operations, users=args.users))

    table = Table(title=f"Simulated {result.operations} operations")
    table.add_column("Operation")
    table.add_column("Succeeded", justify="right")
    table.add_column("Rejected", justify="right")
    for op in sorted(set(result.succeeded) | set(result.rejected)):
        table.add_row(op, str(result.succeeded.get(op, 0)), str(result.rejected.get(op, 0)))
    console.print(table)
    console.print(f"Minted: {result.minted}, spent: {result.spent}, paid out: {result.paid_out}")
    console.print(f"Lowest balance observed: {result.min_balance}")
    if result.min_balance < 0 or not result.ledger_balanced:
        console.print("[red]Invariant violated![/red]")
        sys.exit(1)
