"""Storage abstractions used by the chorepack services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Protocol, Sequence

from ..domain.cards import Card


@dataclass(frozen=True, slots=True)
class PackRecord:
    token: str
    card_ids: tuple[str, ...]
    created_at: datetime
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now


class PackStore(Protocol):
    async def insert(self, record: PackRecord) -> None:
        ...

    async def get_active(self, token: str, now: datetime) -> PackRecord | None:
        """Return the pack for ``token`` only while ``expires_at > now``."""
        ...


class CardStore(Protocol):
    async def list_cards(self) -> Sequence[Card]:
        """Every card in the collection, newest first."""
        ...

    async def get_many(self, card_ids: Iterable[str]) -> Mapping[str, Card]:
        ...

    async def save(self, card: Card) -> Card:
        ...

    async def delete(self, card_id: str) -> None:
        ...
