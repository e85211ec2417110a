"""In-memory storage backend for chorepack."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from ..domain.cards import Card
from .base import CardStore, PackRecord, PackStore


class InMemoryPackStore(PackStore):
    def __init__(self) -> None:
        self._records: dict[str, PackRecord] = {}

    async def insert(self, record: PackRecord) -> None:
        self._records[record.token] = record

    async def get_active(self, token: str, now: datetime) -> PackRecord | None:
        record = self._records.get(token)
        if record is None or not record.is_active(now):
            return None
        return record


class InMemoryCardStore(CardStore):
    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: dict[str, Card] = {}
        for card in cards:
            self._insert(card)

    async def list_cards(self) -> Sequence[Card]:
        return list(reversed(self._cards.values()))

    async def get_many(self, card_ids: Iterable[str]) -> Mapping[str, Card]:
        return {cid: self._cards[cid] for cid in set(card_ids) if cid in self._cards}

    async def save(self, card: Card) -> Card:
        if card.card_id is None or card.card_id not in self._cards:
            return self._insert(card)
        self._cards[card.card_id] = card
        return card

    async def delete(self, card_id: str) -> None:
        self._cards.pop(card_id, None)

    def _insert(self, card: Card) -> Card:
        if card.card_id is None:
            card = card.with_id(uuid.uuid4().hex)
        self._cards[card.card_id] = card
        return card
