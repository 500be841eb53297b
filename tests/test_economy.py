import asyncio
from datetime import timedelta

import pytest

from fishforge.config import EconomyConfig, FishForgeConfig
from fishforge.domain.events import ITEM_BOUGHT, BuyRequested, MemberJoined, SellRequested
from fishforge.domain.items import Item
from fishforge.domain.results import DailyReward, Err, ErrorKind, Ok, Purchase, Sale
from fishforge.storage.base import PersistenceGateway
from fishforge.storage.memory import InMemorySnapshot, memory_gateway
from fishforge.testing import ManualClock, app_fixture


class ToggleSnapshot(InMemorySnapshot):
    """Memory snapshot that can be told to fail or to block on save."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.fail = False
        self.block = False
        self.blocked = asyncio.Event()
        self.release = asyncio.Event()

    async def save(self, data) -> None:
        if self.fail:
            raise OSError("disk unavailable")
        if self.block:
            self.blocked.set()
            await self.release.wait()
        await super().save(data)


def toggle_gateway() -> PersistenceGateway:
    gateway = memory_gateway()
    gateway.accounts = ToggleSnapshot("accounts")
    return gateway


@pytest.mark.asyncio()
async def test_get_balance_creates_account_lazily(memory_app):
    assert not memory_app.accounts.exists(1)
    result = await memory_app.engine.get_balance(1)
    assert isinstance(result, Ok)
    assert result.payload.balance == 0
    assert memory_app.accounts.exists(1)


@pytest.mark.asyncio()
async def test_claim_daily_credits_reward(memory_app, manual_clock):
    result = await memory_app.engine.claim_daily(1)
    assert isinstance(result.payload, DailyReward)
    assert result.payload.amount == 100
    assert result.payload.balance == 100
    assert result.payload.next_claim_at == manual_clock.now + timedelta(hours=12)
    assert memory_app.cooldowns.last_claimed_at(1) == manual_clock.now


@pytest.mark.asyncio()
async def test_second_claim_within_window_reports_remaining_time(memory_app, manual_clock):
    await memory_app.engine.claim_daily(1)
    manual_clock.advance(hours=2, minutes=30)

    result = await memory_app.engine.claim_daily(1)
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.NOT_YET_ELIGIBLE
    assert result.remaining == timedelta(hours=9, minutes=30)
    assert result.remaining_parts() == (9, 30)
    balance = await memory_app.engine.get_balance(1)
    assert balance.payload.balance == 100


@pytest.mark.asyncio()
async def test_claim_after_cooldown_succeeds_and_resets(memory_app, manual_clock):
    await memory_app.engine.claim_daily(1)
    claim_time = manual_clock.advance(hours=12, minutes=1)

    result = await memory_app.engine.claim_daily(1)
    assert isinstance(result, Ok)
    assert result.payload.amount == 100
    assert result.payload.balance == 200
    assert memory_app.cooldowns.last_claimed_at(1) == claim_time

    manual_clock.advance(minutes=1)
    again = await memory_app.engine.claim_daily(1)
    assert again.kind is ErrorKind.NOT_YET_ELIGIBLE


@pytest.mark.asyncio()
async def test_claim_exactly_at_period_boundary_is_allowed(memory_app, manual_clock):
    await memory_app.engine.claim_daily(1)
    manual_clock.advance(hours=12)
    result = await memory_app.engine.claim_daily(1)
    assert result.ok


@pytest.mark.asyncio()
async def test_concurrent_daily_claims_credit_once(memory_app):
    results = await asyncio.gather(*(memory_app.engine.claim_daily(1) for _ in range(5)))
    assert sum(1 for result in results if result.ok) == 1
    assert memory_app.accounts.get_or_create(1).balance == 100


@pytest.mark.asyncio()
async def test_buy_debits_price_and_appends_item(memory_app):
    await memory_app.engine.grant(1, 30)
    result = await memory_app.engine.buy(1, "pike")
    assert isinstance(result.payload, Purchase)
    assert result.payload.item.name == "Pike"
    assert result.payload.balance == 5
    assert [item.name for item in memory_app.accounts.get_or_create(1).inventory] == ["Pike"]


@pytest.mark.asyncio()
async def test_buy_unknown_item(memory_app):
    result = await memory_app.engine.buy(1, "Shark")
    assert result.kind is ErrorKind.ITEM_NOT_FOUND
    assert result.item_name == "Shark"


@pytest.mark.asyncio()
async def test_buy_without_funds_changes_nothing(memory_app):
    await memory_app.engine.grant(1, 9)
    result = await memory_app.engine.buy(1, "Carp")
    assert result.kind is ErrorKind.INSUFFICIENT_FUNDS
    assert (result.required, result.available) == (10, 9)
    account = memory_app.accounts.get_or_create(1)
    assert account.balance == 9
    assert account.inventory == []


@pytest.mark.asyncio()
async def test_concurrent_buys_cannot_double_spend(memory_app):
    await memory_app.engine.grant(1, 10)
    first, second = await asyncio.gather(
        memory_app.engine.buy(1, "Carp"),
        memory_app.engine.buy(1, "Carp"),
    )
    results = (first, second)
    assert [result.ok for result in results].count(True) == 1
    failure = next(result for result in results if not result.ok)
    assert failure.kind is ErrorKind.INSUFFICIENT_FUNDS
    account = memory_app.accounts.get_or_create(1)
    assert account.balance == 0
    assert len(account.inventory) == 1


@pytest.mark.asyncio()
async def test_sell_from_empty_inventory_fails_without_state_change(memory_app):
    result = await memory_app.engine.sell(1, "Carp")
    assert result.kind is ErrorKind.ITEM_NOT_FOUND
    assert not memory_app.accounts.exists(1)
    account = memory_app.accounts.get_or_create(1)
    assert account.balance == 0
    assert account.inventory == []


@pytest.mark.asyncio()
async def test_buy_then_sell_restores_balance_when_price_unchanged(memory_app):
    await memory_app.engine.grant(1, 25)
    await memory_app.engine.buy(1, "Pike")
    result = await memory_app.engine.sell(1, "PIKE")
    assert isinstance(result.payload, Sale)
    assert result.payload.payout == 25
    assert result.payload.balance == 25
    assert memory_app.accounts.get_or_create(1).inventory == []


@pytest.mark.asyncio()
async def test_sell_pays_current_catalog_price_after_reprice(memory_app):
    await memory_app.engine.grant(1, 25)
    await memory_app.engine.buy(1, "Pike")
    await memory_app.engine.replace_catalog(
        [Item(name="Carp", price=10), Item(name="Pike", rarity=2, price=40)]
    )

    owned = memory_app.accounts.get_or_create(1).inventory[0]
    assert owned.price == 25

    result = await memory_app.engine.sell(1, "Pike")
    assert result.payload.payout == 40
    assert result.payload.balance == 40


@pytest.mark.asyncio()
async def test_purchase_price_policy_pays_recorded_price(manual_clock):
    config = FishForgeConfig(economy=EconomyConfig(sell_price_policy="purchase"))
    app = app_fixture(config=config, clock=manual_clock)
    await app.init()
    await app.engine.grant(1, 25)
    await app.engine.buy(1, "Pike")
    await app.engine.replace_catalog([Item(name="Pike", rarity=2, price=40)])

    result = await app.engine.sell(1, "Pike")
    assert result.payload.payout == 25


@pytest.mark.asyncio()
async def test_sell_item_removed_from_catalog_pays_recorded_price(memory_app):
    await memory_app.engine.grant(1, 100)
    await memory_app.engine.buy(1, "Golden Trout")
    await memory_app.engine.replace_catalog([Item(name="Carp", price=10)])

    result = await memory_app.engine.sell(1, "golden trout")
    assert result.payload.payout == 100


@pytest.mark.asyncio()
async def test_sell_removes_one_duplicate(memory_app):
    await memory_app.engine.grant(1, 20)
    await memory_app.engine.buy(1, "Carp")
    await memory_app.engine.buy(1, "Carp")
    await memory_app.engine.sell(1, "Carp")
    view = await memory_app.engine.inventory(1)
    assert view.payload.counts() == {"Carp": 1}
    assert view.payload.balance == 10


@pytest.mark.asyncio()
async def test_other_users_are_not_blocked_by_a_held_lock(memory_app):
    lock = memory_app.engine.locks.for_user(1)
    await lock.acquire()
    try:
        other = await asyncio.wait_for(memory_app.engine.claim_daily(2), timeout=1)
        assert other.ok
        same_user = asyncio.create_task(memory_app.engine.claim_daily(1))
        await asyncio.sleep(0.01)
        assert not same_user.done()
    finally:
        lock.release()
    assert (await same_user).ok


@pytest.mark.asyncio()
async def test_flush_runs_after_user_lock_is_released(manual_clock):
    gateway = toggle_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    await app.engine.grant(1, 10)

    gateway.accounts.block = True
    buying = asyncio.create_task(app.engine.buy(1, "Carp"))
    await asyncio.wait_for(gateway.accounts.blocked.wait(), timeout=1)

    assert not app.engine.locks.locked(1)
    balance = await asyncio.wait_for(app.engine.get_balance(1), timeout=1)
    assert balance.payload.balance == 0

    gateway.accounts.release.set()
    assert (await buying).ok


@pytest.mark.asyncio()
async def test_flush_failure_keeps_in_memory_state(manual_clock, caplog):
    gateway = toggle_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    await app.engine.grant(1, 10)

    gateway.accounts.fail = True
    result = await app.engine.buy(1, "Carp")

    assert result.ok
    assert app.accounts.get_or_create(1).balance == 0
    assert app.engine.flush_failures == 1
    assert "Failed to persist 'accounts' snapshot" in caplog.text


@pytest.mark.asyncio()
async def test_restart_after_lost_flush_sees_pre_buy_state(manual_clock):
    gateway = toggle_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    await app.engine.grant(1, 10)
    gateway.accounts.fail = True
    await app.engine.buy(1, "Carp")

    # Crash: the first app is dropped without shutdown.
    gateway.accounts.fail = False
    restarted = app_fixture(gateway=gateway, clock=manual_clock)
    await restarted.init()
    account = restarted.accounts.get_or_create(1)
    assert account.balance == 10
    assert account.inventory == []


@pytest.mark.asyncio()
async def test_restart_after_flush_sees_post_buy_state(manual_clock):
    gateway = memory_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    await app.engine.grant(1, 10)
    await app.engine.buy(1, "Carp")

    restarted = app_fixture(gateway=gateway, clock=manual_clock)
    await restarted.init()
    account = restarted.accounts.get_or_create(1)
    assert account.balance == 0
    assert [item.name for item in account.inventory] == ["Carp"]


@pytest.mark.asyncio()
async def test_restart_keeps_daily_cooldown(manual_clock):
    gateway = memory_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    await app.engine.claim_daily(1)

    restarted = app_fixture(gateway=gateway, clock=manual_clock)
    await restarted.init()
    manual_clock.advance(hours=1)
    result = await restarted.engine.claim_daily(1)
    assert result.kind is ErrorKind.NOT_YET_ELIGIBLE
    assert result.remaining == timedelta(hours=11)


@pytest.mark.asyncio()
async def test_init_seeds_and_persists_default_snapshots():
    gateway = memory_gateway()
    app = app_fixture(gateway=gateway)
    await app.init()
    assert await gateway.catalog.load() == [
        {"name": "Carp", "rarity": 1, "price": 10},
        {"name": "Pike", "rarity": 2, "price": 25},
        {"name": "Golden Trout", "rarity": 5, "price": 100},
    ]
    assert await gateway.accounts.load() == {}
    assert await gateway.cooldowns.load() == []


@pytest.mark.asyncio()
async def test_dispatch_routes_inbound_events(memory_app):
    joined = await memory_app.dispatch(MemberJoined(5))
    assert joined.payload.balance == 0
    assert memory_app.accounts.exists(5)

    assert (await memory_app.dispatch(BuyRequested(5, "Carp"))).kind is ErrorKind.INSUFFICIENT_FUNDS
    assert (await memory_app.dispatch(SellRequested(5, "Carp"))).kind is ErrorKind.ITEM_NOT_FOUND
    with pytest.raises(TypeError):
        await memory_app.dispatch(object())


@pytest.mark.asyncio()
async def test_register_member_flushes_only_new_accounts(memory_app):
    saves_before = memory_app.gateway.accounts.saves
    await memory_app.engine.register_member(9)
    await memory_app.engine.register_member(9)
    assert memory_app.gateway.accounts.saves == saves_before + 1


@pytest.mark.asyncio()
async def test_purchase_publishes_event_and_survives_listener_error(memory_app):
    seen = []

    async def record(payload):
        seen.append(payload)

    async def explode(payload):
        raise RuntimeError("listener broke")

    memory_app.event_bus.subscribe(ITEM_BOUGHT, record)
    memory_app.event_bus.subscribe(ITEM_BOUGHT, explode)
    await memory_app.engine.grant(1, 10)

    result = await memory_app.engine.buy(1, "Carp")
    assert result.ok
    assert seen == [{"user_id": 1, "item": "Carp", "price": 10}]


@pytest.mark.asyncio()
async def test_grant_rejects_non_positive_amounts(memory_app):
    with pytest.raises(ValueError):
        await memory_app.engine.grant(1, 0)


@pytest.mark.asyncio()
async def test_shutdown_flushes_all_snapshots(manual_clock):
    gateway = memory_gateway()
    app = app_fixture(gateway=gateway, clock=manual_clock)
    await app.init()
    app.accounts.credit(3, 42)
    await app.shutdown()
    assert (await gateway.accounts.load())["3"]["balance"] == 42


@pytest.mark.asyncio()
async def test_replace_catalog_with_invalid_item_keeps_previous_catalog(memory_app):
    with pytest.raises(ValueError):
        await memory_app.engine.replace_catalog(
            Item(name=name, price=price) for name, price in [("Perch", 5), ("Bad", -5)]
        )
    assert [item.name for item in memory_app.catalog.all()] == ["Carp", "Pike", "Golden Trout"]
    assert (await memory_app.engine.buy(1, "Bad")).kind is ErrorKind.ITEM_NOT_FOUND


class BrokenPayoutPolicy:
    name = "broken"

    def payout(self, entry, catalog):
        return -1


@pytest.mark.asyncio()
async def test_failing_payout_keeps_item_in_inventory(manual_clock):
    app = app_fixture(clock=manual_clock, sell_policy=BrokenPayoutPolicy())
    await app.init()
    await app.engine.grant(1, 10)
    await app.engine.buy(1, "Carp")

    with pytest.raises(ValueError):
        await app.engine.sell(1, "Carp")
    account = app.accounts.get_or_create(1)
    assert account.balance == 0
    assert [item.name for item in account.inventory] == ["Carp"]


@pytest.mark.asyncio()
async def test_rejected_buy_from_unseen_user_creates_no_account(memory_app):
    result = await memory_app.engine.buy(8, "Pike")
    assert result.kind is ErrorKind.INSUFFICIENT_FUNDS
    assert result.available == 0
    assert not memory_app.accounts.exists(8)
    assert await memory_app.gateway.accounts.load() == {}
