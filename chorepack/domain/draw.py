"""Rarity-weighted card draws."""

from __future__ import annotations

from random import Random
from typing import Mapping, Sequence

from .cards import Card, Rarity, rarity_weight
from .exceptions import InvalidInput

_default_rng = Random()


def draw_cards(
    pool: Sequence[Card],
    count: int,
    *,
    rng: Random | None = None,
    weights: Mapping[Rarity, float] | None = None,
) -> list[Card]:
    """Draw ``count`` cards from ``pool`` with replacement, weighted by rarity.

    The same card may appear several times in the result. Without an explicit
    ``rng`` the module-level random source is used.
    """
    if not pool:
        raise InvalidInput("Cannot draw from an empty pool")
    if count < 0:
        raise InvalidInput(f"Draw count must not be negative, got {count}")
    source = rng or _default_rng
    card_weights = [rarity_weight(card.rarity, weights) for card in pool]
    if any(weight <= 0 for weight in card_weights):
        raise InvalidInput("Every rarity needs a strictly positive weight")
    total = sum(card_weights)
    return [_weighted_pick(pool, card_weights, total, source) for _ in range(count)]


def _weighted_pick(
    pool: Sequence[Card], card_weights: Sequence[float], total: float, rng: Random
) -> Card:
    remainder = rng.random() * total
    for card, weight in zip(pool, card_weights):
        remainder -= weight
        if remainder <= 0:
            return card
    # Rounding can leave a sliver of remainder after the last card.
    return pool[-1]
