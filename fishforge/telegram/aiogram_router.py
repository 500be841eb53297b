"""Factory helpers to wire the FishForge economy into aiogram."""

from __future__ import annotations

from typing import Any, Iterable

from aiogram import Router
from aiogram.filters import JOIN_TRANSITION, ChatMemberUpdatedFilter, Command, CommandObject
from aiogram.types import CallbackQuery, ChatMemberUpdated, Message

from ..app import EconomyApp
from ..domain.events import (
    BalanceRequested,
    BuyRequested,
    DailyClaimRequested,
    InventoryRequested,
    MemberJoined,
    SellRequested,
)
from ..domain.items import Item
from ..domain.results import (
    BalanceInfo,
    DailyReward,
    Err,
    ErrorKind,
    InventoryView,
    Purchase,
    Result,
    Sale,
)
from .keyboards import BUY_PREFIX, shop_keyboard, welcome_keyboard


def build_router(app: EconomyApp) -> Router:
    if not app.initialized:
        raise RuntimeError("Вызовите await app.init() перед созданием роутера.")

    router = Router()

    @router.chat_member(ChatMemberUpdatedFilter(member_status_changed=JOIN_TRANSITION))
    async def handle_join(event: ChatMemberUpdated) -> None:
        user = event.new_chat_member.user
        if user.is_bot:
            return
        await app.dispatch(MemberJoined(user.id))

    @router.message(Command("start", "help"))
    async def handle_start(message: Message) -> None:
        user = message.from_user
        if user and not user.is_bot:
            await app.dispatch(MemberJoined(user.id))
        await message.answer(render_help_message(), reply_markup=welcome_keyboard())

    @router.message(Command("balance"))
    async def handle_balance(message: Message) -> None:
        user = message.from_user
        if not user or user.is_bot:
            return
        await message.answer(format_result(await app.dispatch(BalanceRequested(user.id))))

    @router.message(Command("daily"))
    async def handle_daily(message: Message) -> None:
        user = message.from_user
        if not user or user.is_bot:
            return
        await message.answer(format_result(await app.dispatch(DailyClaimRequested(user.id))))

    @router.callback_query(lambda c: c.data == "fishforge:daily")
    async def handle_daily_callback(callback: CallbackQuery) -> None:
        result = await app.dispatch(DailyClaimRequested(callback.from_user.id))
        await callback.answer()
        await callback.message.answer(format_result(result))

    @router.message(Command("shop"))
    async def handle_shop(message: Message) -> None:
        items = app.catalog.all()
        await message.answer(format_shop(items), reply_markup=shop_keyboard(items))

    @router.callback_query(lambda c: c.data == "fishforge:shop")
    async def handle_shop_callback(callback: CallbackQuery) -> None:
        items = app.catalog.all()
        await callback.answer()
        await callback.message.answer(format_shop(items), reply_markup=shop_keyboard(items))

    @router.message(Command("buy"))
    async def handle_buy(message: Message, command: CommandObject) -> None:
        user = message.from_user
        if not user or user.is_bot:
            return
        item_name = extract_item_name(command)
        if not item_name:
            await message.answer("Использование: /buy <предмет>")
            return
        await message.answer(format_result(await app.dispatch(BuyRequested(user.id, item_name))))

    @router.callback_query(lambda c: c.data and c.data.startswith(BUY_PREFIX))
    async def handle_buy_callback(callback: CallbackQuery) -> None:
        item_name = callback.data[len(BUY_PREFIX):]
        result = await app.dispatch(BuyRequested(callback.from_user.id, item_name))
        if isinstance(result, Err):
            await callback.answer(format_error(result), show_alert=True)
            return
        await callback.answer()
        await callback.message.answer(format_result(result))

    @router.message(Command("sell"))
    async def handle_sell(message: Message, command: CommandObject) -> None:
        user = message.from_user
        if not user or user.is_bot:
            return
        item_name = extract_item_name(command)
        if not item_name:
            await message.answer("Использование: /sell <предмет>")
            return
        await message.answer(format_result(await app.dispatch(SellRequested(user.id, item_name))))

    @router.message(Command("inventory"))
    async def handle_inventory(message: Message) -> None:
        user = message.from_user
        if not user or user.is_bot:
            return
        await message.answer(format_result(await app.dispatch(InventoryRequested(user.id))))

    @router.callback_query(lambda c: c.data == "fishforge:inventory")
    async def handle_inventory_callback(callback: CallbackQuery) -> None:
        result = await app.dispatch(InventoryRequested(callback.from_user.id))
        await callback.answer()
        await callback.message.answer(format_result(result))

    return router


def extract_item_name(command: CommandObject | None) -> str | None:
    if command is None or not command.args:
        return None
    # Item names may contain spaces, so everything after the command counts.
    name = " ".join(command.args.split())
    return name or None


def render_help_message() -> str:
    lines = [
        "Привет! Зарабатывай монеты и собирай улов.",
        "",
        "Команды:",
        "• /balance — показать баланс",
        "• /daily — получить ежедневную награду",
        "• /shop — список предметов",
        "• /buy <предмет> — купить предмет",
        "• /sell <предмет> — продать предмет",
        "• /inventory — открыть инвентарь",
        "• /help — показать это сообщение",
    ]
    return "\n".join(lines)


def format_result(result: Result[Any]) -> str:
    if isinstance(result, Err):
        return format_error(result)
    payload = result.payload
    if isinstance(payload, BalanceInfo):
        return f"💰 Твой баланс: {payload.balance} монет."
    if isinstance(payload, DailyReward):
        return (
            f"🎁 Ты получил ежедневную награду: {payload.amount} монет!\n"
            f"💰 Баланс: {payload.balance}"
        )
    if isinstance(payload, Purchase):
        return (
            f"🛒 Куплено: {payload.item.name} за {payload.item.price} монет.\n"
            f"💰 Баланс: {payload.balance}"
        )
    if isinstance(payload, Sale):
        return (
            f"💸 Продано: {payload.item.name} за {payload.payout} монет.\n"
            f"💰 Баланс: {payload.balance}"
        )
    if isinstance(payload, InventoryView):
        return format_inventory(payload)
    raise TypeError(f"Unsupported payload {type(payload).__name__}")


def format_error(error: Err) -> str:
    if error.kind is ErrorKind.NOT_YET_ELIGIBLE:
        hours, minutes = error.remaining_parts()
        return f"⏱️ Следующую награду можно получить через {hours} ч {minutes} мин."
    if error.kind is ErrorKind.INSUFFICIENT_FUNDS:
        return f"Недостаточно монет: нужно {error.required}, у тебя {error.available}."
    if error.kind is ErrorKind.ITEM_NOT_FOUND:
        return f"Предмет «{error.item_name}» не найден."
    return error.detail or "Операция не выполнена."


def format_shop(items: Iterable[Item]) -> str:
    items = list(items)
    if not items:
        return "Магазин пуст."
    lines = ["🏪 Магазин:"]
    for item in items:
        lines.append(f"• {item.name} [редкость {item.rarity}]: {item.price} монет")
    return "\n".join(lines)


def format_inventory(view: InventoryView) -> str:
    counts = view.counts()
    if not counts:
        return f"🎒 Инвентарь пуст.\n💰 Баланс: {view.balance}"
    lines = ["🎒 Инвентарь:"]
    for name, amount in counts.items():
        lines.append(f"• {name}: {amount} шт.")
    lines.append("")
    lines.append(f"💰 Баланс: {view.balance}")
    return "\n".join(lines)
