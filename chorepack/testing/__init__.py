"""Testing utilities for chorepack."""

from .clock import ManualScheduler
from .factory import CardFactory
from .fixtures import manual_scheduler, memory_app

__all__ = [
    "CardFactory",
    "ManualScheduler",
    "manual_scheduler",
    "memory_app",
]
