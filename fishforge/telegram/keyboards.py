"""Keyboard helpers for FishForge bots."""

from __future__ import annotations

from typing import Iterable

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from ..domain.items import Item

BUY_PREFIX = "fishforge:buy:"
# Telegram rejects callback data longer than 64 bytes.
_CALLBACK_LIMIT = 64


def shop_keyboard(items: Iterable[Item]) -> InlineKeyboardMarkup:
    rows = []
    for item in items:
        data = f"{BUY_PREFIX}{item.name}"
        if len(data.encode("utf-8")) > _CALLBACK_LIMIT:
            continue
        rows.append(
            [InlineKeyboardButton(text=f"🛒 {item.name} — {item.price}", callback_data=data)]
        )
    rows.append([InlineKeyboardButton(text="🎒 Инвентарь", callback_data="fishforge:inventory")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def welcome_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🎁 Ежедневная награда", callback_data="fishforge:daily")],
            [InlineKeyboardButton(text="🏪 Магазин", callback_data="fishforge:shop")],
            [InlineKeyboardButton(text="🎒 Инвентарь", callback_data="fishforge:inventory")],
        ]
    )
