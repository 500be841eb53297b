"""Telegram integration helpers."""

from .aiogram_router import build_router
from .filters import AdminFilter
from .keyboards import shop_keyboard, welcome_keyboard

__all__ = [
    "build_router",
    "AdminFilter",
    "shop_keyboard",
    "welcome_keyboard",
]
