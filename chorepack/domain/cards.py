"""Card domain models and the rarity weight table."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .exceptions import InvalidInput


class Rarity(str, Enum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    LEGENDARY = "LEGENDARY"


RARITY_WEIGHTS: Mapping[Rarity, float] = MappingProxyType(
    {
        Rarity.COMMON: 0.50,
        Rarity.UNCOMMON: 0.30,
        Rarity.RARE: 0.15,
        Rarity.LEGENDARY: 0.05,
    }
)


def rarity_weight(rarity: Rarity, weights: Mapping[Rarity, float] | None = None) -> float:
    table = weights if weights is not None else RARITY_WEIGHTS
    return table[rarity]


def weights_from_config(overrides: Mapping[str, float]) -> Mapping[Rarity, float]:
    """Merge ``{"RARE": 0.2}``-style overrides on top of the default table."""
    merged = dict(RARITY_WEIGHTS)
    for code, weight in overrides.items():
        key = str(code).upper()
        if key not in Rarity.__members__:
            raise InvalidInput(f"Rarity weight table contains invalid rarity '{code}'")
        merged[Rarity[key]] = float(weight)
    return MappingProxyType(merged)


@dataclass(frozen=True, slots=True)
class Card:
    """A chore card. ``card_id`` stays ``None`` until the card is persisted."""

    title: str
    rarity: Rarity = Rarity.COMMON
    flavour_text: str = ""
    time_estimate: str | None = None
    frequency: str | None = None
    image_url: str | None = None
    card_id: str | None = None

    def with_id(self, card_id: str) -> "Card":
        return replace(self, card_id=card_id)
