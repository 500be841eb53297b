"""Daily reward cooldown tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator


@dataclass(slots=True)
class CooldownRecord:
    user_id: int
    last_claimed_at: datetime


def as_utc(moment: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class CooldownTracker:
    """Last-claim timestamps per user, independent of account lifecycle."""

    def __init__(self, period: timedelta, records: dict[int, CooldownRecord] | None = None) -> None:
        if period <= timedelta(0):
            raise ValueError("Cooldown period must be positive")
        self.period = period
        self._records: dict[int, CooldownRecord] = dict(records or {})

    def last_claimed_at(self, user_id: int) -> datetime | None:
        record = self._records.get(user_id)
        return record.last_claimed_at if record else None

    def time_remaining(self, user_id: int, now: datetime) -> timedelta:
        """Zero when claimable, otherwise the time left until ``last + period``."""
        last = self.last_claimed_at(user_id)
        if last is None:
            return timedelta(0)
        remaining = as_utc(last) + self.period - as_utc(now)
        return max(timedelta(0), remaining)

    def record_claim(self, user_id: int, now: datetime) -> CooldownRecord:
        record = CooldownRecord(user_id=user_id, last_claimed_at=as_utc(now))
        self._records[user_id] = record
        return record

    def clear(self, user_id: int) -> bool:
        return self._records.pop(user_id, None) is not None

    def replace(self, records: dict[int, CooldownRecord]) -> None:
        self._records = dict(records)

    def __iter__(self) -> Iterator[CooldownRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
