"""Storage backends for chorepack."""

from .base import CardStore, PackRecord, PackStore
from .memory import InMemoryCardStore, InMemoryPackStore
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "CardStore",
    "PackRecord",
    "PackStore",
    "InMemoryCardStore",
    "InMemoryPackStore",
    "AsyncSQLAlchemyStorage",
]
