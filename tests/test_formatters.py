from datetime import timedelta

from aiogram.filters import CommandObject

from fishforge.domain.items import Item
from fishforge.domain.results import Err, ErrorKind, InventoryView, Ok, Purchase
from fishforge.telegram.aiogram_router import (
    extract_item_name,
    format_error,
    format_inventory,
    format_result,
    format_shop,
)
from fishforge.telegram.keyboards import BUY_PREFIX, shop_keyboard


def test_format_error_shows_remaining_hours_and_minutes():
    error = Err(ErrorKind.NOT_YET_ELIGIBLE, remaining=timedelta(hours=9, minutes=30, seconds=59))
    assert format_error(error) == "⏱️ Следующую награду можно получить через 9 ч 30 мин."


def test_format_error_insufficient_funds():
    error = Err(ErrorKind.INSUFFICIENT_FUNDS, required=25, available=10)
    assert "нужно 25" in format_error(error)
    assert "у тебя 10" in format_error(error)


def test_format_result_purchase():
    result = Ok(Purchase(user_id=1, item=Item(name="Pike", rarity=2, price=25), balance=75))
    text = format_result(result)
    assert "Pike" in text and "25" in text
    assert text.endswith("Баланс: 75")


def test_format_inventory_groups_duplicates():
    carp = Item(name="Carp", price=10)
    view = InventoryView(user_id=1, balance=5, items=(carp, carp, Item(name="Pike", price=25)))
    text = format_inventory(view)
    assert "• Carp: 2 шт." in text
    assert "• Pike: 1 шт." in text


def test_format_inventory_empty():
    assert format_inventory(InventoryView(user_id=1, balance=0)).startswith("🎒 Инвентарь пуст.")


def test_format_shop_empty():
    assert format_shop([]) == "Магазин пуст."


def test_extract_item_name_keeps_spaces():
    command = CommandObject(prefix="/", command="buy", args="golden   trout")
    assert extract_item_name(command) == "golden trout"
    assert extract_item_name(CommandObject(prefix="/", command="buy")) is None


def test_shop_keyboard_skips_long_names():
    keyboard = shop_keyboard([Item(name="Carp", price=10), Item(name="x" * 80, price=1)])
    buttons = [button for row in keyboard.inline_keyboard for button in row]
    buy_data = [b.callback_data for b in buttons if b.callback_data.startswith(BUY_PREFIX)]
    assert buy_data == [f"{BUY_PREFIX}Carp"]
