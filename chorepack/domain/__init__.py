"""Domain models and services."""

from .cards import RARITY_WEIGHTS, Card, Rarity, rarity_weight
from .draw import draw_cards
from .exceptions import (
    ChorePackError,
    EmptyPool,
    GenerationAborted,
    InvalidInput,
    InvalidTransition,
    PackNotFound,
    StorageError,
    StoreNotConfigured,
)

__all__ = [
    "RARITY_WEIGHTS",
    "Card",
    "Rarity",
    "rarity_weight",
    "draw_cards",
    "ChorePackError",
    "EmptyPool",
    "GenerationAborted",
    "InvalidInput",
    "InvalidTransition",
    "PackNotFound",
    "StorageError",
    "StoreNotConfigured",
]
