"""Issuing and resolving shareable packs."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

from .cards import Card
from .exceptions import PackNotFound
from ..storage.base import CardStore, PackRecord, PackStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_token(token_bytes: int = 12) -> str:
    """Return an unguessable lowercase hex token carrying ``token_bytes`` of entropy."""
    return secrets.token_hex(token_bytes)


class PackService:
    """Create time-limited packs and resolve them back into cards."""

    def __init__(
        self,
        pack_store: PackStore,
        card_store: CardStore,
        *,
        ttl: timedelta = timedelta(days=7),
        token_bytes: int = 12,
        clock: Clock = utc_now,
    ) -> None:
        self._packs = pack_store
        self._cards = card_store
        self._ttl = ttl
        self._token_bytes = token_bytes
        self._clock = clock

    async def create_pack(self, card_ids: Sequence[str]) -> str:
        """Persist ``card_ids`` under a fresh token and return the token.

        Token collisions are not checked. Storage failures surface as
        ``StorageError``.
        """
        now = self._clock()
        record = PackRecord(
            token=new_token(self._token_bytes),
            card_ids=tuple(card_ids),
            created_at=now,
            expires_at=now + self._ttl,
        )
        await self._packs.insert(record)
        logger.info(
            "Created pack %s with %d card(s), expires %s",
            record.token,
            len(record.card_ids),
            record.expires_at.isoformat(),
        )
        return record.token

    async def get_pack(self, token: str) -> list[Card]:
        """Resolve ``token`` into its cards, in the order they were drawn.

        Raises ``PackNotFound`` when the token is unknown, expired, or names a
        card that no longer exists.
        """
        record = await self._packs.get_active(token, self._clock())
        if record is None:
            logger.info("Pack %s not found or expired", token)
            raise PackNotFound(token)

        resolved = await self._cards.get_many(record.card_ids)
        missing = [cid for cid in record.card_ids if cid not in resolved]
        if missing:
            logger.info("Pack %s references %d deleted card(s)", token, len(set(missing)))
            raise PackNotFound(token)

        logger.debug("Resolved pack %s", token)
        return [resolved[cid] for cid in record.card_ids]
