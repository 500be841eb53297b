"""Economy simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from random import Random
from typing import Dict, Iterable

from ..app import EconomyApp
from ..config import FishForgeConfig
from ..domain.items import DEFAULT_ITEMS, Item
from ..domain.results import DailyReward, Err, Purchase, Sale
from ..storage.memory import memory_gateway

OPERATIONS = ("daily", "buy", "sell", "balance")


@dataclass(slots=True)
class SimulationResult:
    operations: int
    succeeded: Dict[str, int] = field(default_factory=dict)
    rejected: Dict[str, int] = field(default_factory=dict)
    min_balance: int = 0
    minted: int = 0
    spent: int = 0
    paid_out: int = 0
    final_balances: Dict[int, int] = field(default_factory=dict)

    @property
    def ledger_balanced(self) -> bool:
        return sum(self.final_balances.values()) == self.minted - self.spent + self.paid_out


class EconomySimulator:
    """Monte-Carlo workload over an isolated in-memory economy."""

    def __init__(
        self,
        config: FishForgeConfig | None = None,
        *,
        items: Iterable[Item] = DEFAULT_ITEMS,
        rng: Random | None = None,
    ) -> None:
        self._config = config or FishForgeConfig()
        self._items = tuple(items)
        self._rng = rng or Random()

    async def simulate(
        self,
        *,
        operations: int = 1000,
        users: int = 3,
        step: timedelta = timedelta(hours=1),
    ) -> SimulationResult:
        app = EconomyApp(self._config, gateway=memory_gateway(), default_items=self._items)
        await app.init()
        engine = app.engine
        names = [item.name for item in self._items]
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        result = SimulationResult(operations=operations)

        for _ in range(operations):
            user_id = self._rng.randint(1, users)
            op = self._rng.choice(OPERATIONS)
            now += step * self._rng.random()
            if op == "daily":
                outcome = await engine.claim_daily(user_id, now)
            elif op == "buy":
                outcome = await engine.buy(user_id, self._rng.choice(names))
            elif op == "sell":
                outcome = await engine.sell(user_id, self._rng.choice(names))
            else:
                outcome = await engine.get_balance(user_id)

            if isinstance(outcome, Err):
                result.rejected[op] = result.rejected.get(op, 0) + 1
            else:
                result.succeeded[op] = result.succeeded.get(op, 0) + 1
                payload = outcome.payload
                if isinstance(payload, DailyReward):
                    result.minted += payload.amount
                elif isinstance(payload, Purchase):
                    result.spent += payload.item.price
                elif isinstance(payload, Sale):
                    result.paid_out += payload.payout
            result.min_balance = min(result.min_balance, app.accounts.get_or_create(user_id).balance)

        result.final_balances = {account.user_id: account.balance for account in app.accounts}
        await app.shutdown()
        return result
