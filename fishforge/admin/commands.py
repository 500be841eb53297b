"""Admin command wiring for aiogram."""

from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from ..app import EconomyApp
from ..telegram.filters import AdminFilter
from .service import AdminService

logger = logging.getLogger(__name__)


def build_admin_router(app: EconomyApp) -> Router:
    router = Router()
    router.message.filter(AdminFilter(app.config.admin))
    service = AdminService(app.engine, app.config.economy)
    commands = app.config.admin.commands

    @router.message(Command(commands.reload_catalog))
    async def handle_reload(message: Message) -> None:
        try:
            items = await service.reload_catalog(actor=_actor(message))
        except (OSError, ValueError) as exc:
            logger.warning("Catalog reload failed: %s", exc)
            await message.answer(f"Не удалось перезагрузить каталог: {exc}")
            return
        await message.answer(f"Каталог перезагружен: {len(items)} предметов.")

    @router.message(Command(commands.grant))
    async def handle_grant(message: Message, command: CommandObject) -> None:
        parts = (command.args or "").split()
        if len(parts) < 2 or not all(part.lstrip("-").isdigit() for part in parts[:2]):
            await message.answer(f"Использование: /{commands.grant} <user_id> <amount>")
            return
        target, amount = int(parts[0]), int(parts[1])
        if amount <= 0:
            await message.answer("Сумма должна быть положительной.")
            return
        balance = await service.grant_currency(target, amount, actor=_actor(message))
        await message.answer(f"Выдано {amount} монет пользователю {target}. Баланс: {balance}.")

    @router.message(Command(commands.reset_daily))
    async def handle_reset_daily(message: Message, command: CommandObject) -> None:
        raw = (command.args or "").strip()
        if not raw.isdigit():
            await message.answer(f"Использование: /{commands.reset_daily} <user_id>")
            return
        cleared = await service.reset_daily(int(raw), actor=_actor(message))
        if cleared:
            await message.answer(f"Ежедневная награда для {raw} снова доступна.")
        else:
            await message.answer(f"У пользователя {raw} нет активного кулдауна.")

    return router


def _actor(message: Message) -> int | None:
    return message.from_user.id if message.from_user else None
