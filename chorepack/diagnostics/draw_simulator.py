"""Monte-Carlo check of the rarity weight table."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from random import Random
from typing import Dict, Mapping, Sequence

from ..domain.cards import Card, Rarity, rarity_weight
from ..domain.draw import draw_cards


@dataclass(slots=True)
class SimulationResult:
    draws: int
    counts: Dict[Rarity, int] = field(default_factory=dict)
    expected: Dict[Rarity, float] = field(default_factory=dict)

    def frequency(self, rarity: Rarity) -> float:
        if not self.draws:
            return 0.0
        return self.counts.get(rarity, 0) / self.draws

    def max_deviation(self) -> float:
        return max(
            (abs(self.frequency(rarity) - share) for rarity, share in self.expected.items()),
            default=0.0,
        )


class DrawSimulator:
    """Draw a large sample from a pool and compare rarity shares with the weights."""

    def __init__(
        self,
        *,
        rng: Random | None = None,
        weights: Mapping[Rarity, float] | None = None,
    ) -> None:
        self._rng = rng or Random()
        self._weights = weights

    def simulate(self, pool: Sequence[Card], *, draws: int = 100_000) -> SimulationResult:
        drawn = draw_cards(pool, draws, rng=self._rng, weights=self._weights)
        counts = Counter(card.rarity for card in drawn)

        pool_weight = {rarity: 0.0 for rarity in Rarity}
        for card in pool:
            pool_weight[card.rarity] += rarity_weight(card.rarity, self._weights)
        total = sum(pool_weight.values())
        expected = {
            rarity: weight / total for rarity, weight in pool_weight.items() if weight > 0
        }
        return SimulationResult(draws=draws, counts=dict(counts), expected=expected)
