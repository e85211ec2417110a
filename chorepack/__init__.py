"""chorepack public API."""

from .app import ChorePackApp, get_default_app, reset_default_app
from .config import ChorePackConfig
from .domain.cards import Card, Rarity
from .domain.reveal import Phase, RevealStateMachine

__all__ = [
    "ChorePackApp",
    "ChorePackConfig",
    "Card",
    "Rarity",
    "Phase",
    "RevealStateMachine",
    "get_default_app",
    "reset_default_app",
]
