"""Generate one pack per player and hand out shareable links."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Mapping, Sequence

from .cards import Card, Rarity
from .draw import draw_cards
from .exceptions import EmptyPool, GenerationAborted, InvalidInput, StorageError
from .packs import PackService
from ..storage.base import CardStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayerPack:
    player_index: int
    cards: tuple[Card, ...]
    token: str
    link: str


class PackGenerationFlow:
    """Draw ``cards_per_player`` cards for each player and register their packs."""

    def __init__(
        self,
        packs: PackService,
        card_store: CardStore,
        link_for: Callable[[str], str],
        *,
        rng: Random | None = None,
        weights: Mapping[Rarity, float] | None = None,
    ) -> None:
        self._packs = packs
        self._cards = card_store
        self._link_for = link_for
        self._rng = rng
        self._weights = weights

    async def generate(
        self,
        player_count: int,
        cards_per_player: int,
        pool: Sequence[Card] | None = None,
    ) -> list[PlayerPack]:
        if player_count <= 0:
            raise InvalidInput(f"Player count must be positive, got {player_count}")
        if cards_per_player <= 0:
            raise InvalidInput(f"Cards per player must be positive, got {cards_per_player}")
        if pool is None:
            pool = await self._cards.list_cards()
        if not pool:
            raise EmptyPool("No cards in the deck. Add some cards first.")
        unsaved = [card.title for card in pool if card.card_id is None]
        if unsaved:
            raise InvalidInput(f"Cards must be saved before they can be packed: {unsaved}")

        issued: list[PlayerPack] = []
        for player_index in range(1, player_count + 1):
            drawn = draw_cards(pool, cards_per_player, rng=self._rng, weights=self._weights)
            try:
                token = await self._packs.create_pack([card.card_id for card in drawn])
            except StorageError as exc:
                logger.error(
                    "Generation stopped at player %d of %d: %s",
                    player_index,
                    player_count,
                    exc,
                )
                raise GenerationAborted(player_index, issued) from exc
            issued.append(
                PlayerPack(
                    player_index=player_index,
                    cards=tuple(drawn),
                    token=token,
                    link=self._link_for(token),
                )
            )

        logger.info("Generated %d pack(s) of %d card(s)", len(issued), cards_per_player)
        return issued
