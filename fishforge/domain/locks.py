"""Per-user exclusive access."""

from __future__ import annotations

import asyncio


class UserLocks:
    """Lazily created ``asyncio.Lock`` per user id.

    Operations on different users never contend. Locks are kept for the
    life of the process, like the accounts they guard.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}

    def for_user(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks.setdefault(user_id, asyncio.Lock())
        return lock

    def locked(self, user_id: int) -> bool:
        lock = self._locks.get(user_id)
        return bool(lock and lock.locked())
