"""Top level application object for chorepack."""

from __future__ import annotations

import logging
from datetime import timedelta
from random import Random
from typing import Any, Callable

from .config import ChorePackConfig
from .domain.cards import weights_from_config
from .domain.exceptions import StoreNotConfigured
from .domain.generation import PackGenerationFlow
from .domain.packs import PackService
from .domain.reveal import RevealStateMachine, SessionListener
from .domain.timeline import Scheduler
from .storage.base import CardStore, PackStore
from .storage.memory import InMemoryCardStore, InMemoryPackStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage

logger = logging.getLogger(__name__)


class ChorePackApp:
    """Central dependency container wiring stores and services together."""

    def __init__(
        self,
        config: ChorePackConfig,
        *,
        pack_store: PackStore | None = None,
        card_store: CardStore | None = None,
        rng: Random | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config
        self.weights = weights_from_config(config.packs.rarity_weights)
        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else None)
        self._scheduler = scheduler

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.pack_store, self.card_store = self._wire_storage(pack_store, card_store)

        self.pack_service = PackService(
            self.pack_store,
            self.card_store,
            ttl=timedelta(days=config.packs.ttl_days),
            token_bytes=config.packs.token_bytes,
        )
        self.generation = PackGenerationFlow(
            self.pack_service,
            self.card_store,
            config.packs.link_for,
            rng=self._rng,
            weights=self.weights,
        )

    def _wire_storage(
        self,
        pack_store: PackStore | None,
        card_store: CardStore | None,
    ) -> tuple[PackStore, CardStore]:
        if pack_store and card_store:
            return pack_store, card_store

        backend = self.config.storage.backend
        if backend == "memory":
            return (
                pack_store or InMemoryPackStore(),
                card_store or InMemoryCardStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise StoreNotConfigured(
                    "SQLAlchemy backend requires CHOREPACK_STORAGE_DSN, "
                    "e.g. sqlite+aiosqlite:///./chorepack.db"
                )
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                pack_store or storage.pack_store(),
                card_store or storage.card_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def reveal(
        self,
        *,
        on_change: SessionListener | None = None,
        on_open: Callable[[], None] | None = None,
    ) -> RevealStateMachine:
        """Create a fresh reveal session for one page view."""
        return RevealStateMachine(
            self.pack_service,
            timing=self.config.reveal,
            scheduler=self._scheduler,
            on_change=on_change,
            on_open=on_open,
        )

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "base_url": self.config.packs.base_url,
            "ttl_days": self.config.packs.ttl_days,
            "weights": {rarity.value: weight for rarity, weight in self.weights.items()},
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()


_default_app: ChorePackApp | None = None


def get_default_app() -> ChorePackApp:
    """Return the process-wide app, building it from the environment on first use."""
    global _default_app
    if _default_app is None:
        _default_app = ChorePackApp(ChorePackConfig.from_env())
        logger.debug("Initialised default app with %s storage", _default_app.config.storage.backend)
    return _default_app


def reset_default_app() -> None:
    global _default_app
    _default_app = None
