"""SQLAlchemy storage backend for FishForge."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .base import ACCOUNTS, CATALOG, COOLDOWNS, PersistenceGateway, SnapshotResource


class Base(DeclarativeBase):
    pass


class SnapshotTable(Base):
    __tablename__ = "fishforge_snapshots"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[Any] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AsyncSQLAlchemyStorage:
    """Bundle of async snapshot resources backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def snapshot(self, name: str) -> "AsyncSQLAlchemySnapshot":
        return AsyncSQLAlchemySnapshot(name, self._session_factory)

    def gateway(self) -> PersistenceGateway:
        return PersistenceGateway(
            catalog=self.snapshot(CATALOG),
            accounts=self.snapshot(ACCOUNTS),
            cooldowns=self.snapshot(COOLDOWNS),
            on_close=self.dispose,
        )


class AsyncSQLAlchemySnapshot(SnapshotResource):
    def __init__(self, name: str, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.name = name
        self._session_factory = session_factory

    async def load(self) -> Any | None:
        async with self._session_factory() as session:
            row = await session.get(SnapshotTable, self.name)
            return row.payload if row else None

    async def save(self, data: Any) -> None:
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            stmt = (
                update(SnapshotTable)
                .where(SnapshotTable.name == self.name)
                .values(payload=data, updated_at=now)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(SnapshotTable(name=self.name, payload=data, updated_at=now))
            await session.commit()
