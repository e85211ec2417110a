"""SQLAlchemy storage backend for chorepack."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Iterable, Mapping, Sequence

from sqlalchemy import DateTime, JSON, String, Text, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.cards import Card, Rarity
from ..domain.exceptions import StorageError
from .base import CardStore, PackRecord, PackStore

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class CardTable(Base):
    __tablename__ = "chorepack_cards"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    rarity: Mapped[str] = mapped_column(String(16))
    flavour_text: Mapped[str] = mapped_column(Text, default="")
    time_estimate: Mapped[str | None] = mapped_column(String(64), nullable=True)
    frequency: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class PackTable(Base):
    __tablename__ = "chorepack_packs"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    card_ids: Mapped[list[str]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def pack_store(self) -> "AsyncSQLAlchemyPackStore":
        return AsyncSQLAlchemyPackStore(self._session_factory)

    def card_store(self) -> "AsyncSQLAlchemyCardStore":
        return AsyncSQLAlchemyCardStore(self._session_factory)


@asynccontextmanager
async def _storage_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage call '%s' failed: %s", action, exc, exc_info=True)
        raise StorageError(f"Storage call '{action}' failed") from exc


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC.
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AsyncSQLAlchemyPackStore(PackStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, record: PackRecord) -> None:
        async with _storage_errors("insert pack"):
            async with self._session_factory() as session:
                session.add(
                    PackTable(
                        token=record.token,
                        card_ids=list(record.card_ids),
                        created_at=record.created_at,
                        expires_at=record.expires_at,
                    )
                )
                await session.commit()

    async def get_active(self, token: str, now: datetime) -> PackRecord | None:
        async with _storage_errors("get pack"):
            async with self._session_factory() as session:
                stmt = select(PackTable).where(
                    PackTable.token == token, PackTable.expires_at > now
                )
                row = (await session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return PackRecord(
            token=row.token,
            card_ids=tuple(row.card_ids),
            created_at=_as_utc(row.created_at),
            expires_at=_as_utc(row.expires_at),
        )


class AsyncSQLAlchemyCardStore(CardStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_cards(self) -> Sequence[Card]:
        async with _storage_errors("list cards"):
            async with self._session_factory() as session:
                stmt = select(CardTable).order_by(CardTable.created_at.desc())
                rows = (await session.execute(stmt)).scalars().all()
        return [_row_to_card(row) for row in rows]

    async def get_many(self, card_ids: Iterable[str]) -> Mapping[str, Card]:
        wanted = set(card_ids)
        if not wanted:
            return {}
        async with _storage_errors("get cards"):
            async with self._session_factory() as session:
                stmt = select(CardTable).where(CardTable.id.in_(wanted))
                rows = (await session.execute(stmt)).scalars().all()
        return {row.id: _row_to_card(row) for row in rows}

    async def save(self, card: Card) -> Card:
        async with _storage_errors("save card"):
            async with self._session_factory() as session:
                row = await session.get(CardTable, card.card_id) if card.card_id else None
                if row is None:
                    row = CardTable(
                        id=card.card_id or uuid.uuid4().hex,
                        created_at=datetime.now(timezone.utc),
                    )
                    session.add(row)
                row.title = card.title
                row.rarity = card.rarity.value
                row.flavour_text = card.flavour_text
                row.time_estimate = card.time_estimate
                row.frequency = card.frequency
                row.image_url = card.image_url
                await session.commit()
                return _row_to_card(row)

    async def delete(self, card_id: str) -> None:
        async with _storage_errors("delete card"):
            async with self._session_factory() as session:
                await session.execute(delete(CardTable).where(CardTable.id == card_id))
                await session.commit()


def _row_to_card(row: CardTable) -> Card:
    try:
        rarity = Rarity(row.rarity)
    except ValueError as exc:
        logger.error("Card %s has unknown rarity %r", row.id, row.rarity)
        raise StorageError(f"Card {row.id} has unknown rarity {row.rarity!r}") from exc
    return Card(
        card_id=row.id,
        title=row.title,
        rarity=rarity,
        flavour_text=row.flavour_text or "",
        time_estimate=row.time_estimate,
        frequency=row.frequency,
        image_url=row.image_url,
    )
