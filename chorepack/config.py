"""Configuration models for chorepack."""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field
from typing import Literal, Mapping

StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure where cards and packs are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.backend != "sqlalchemy":
            return None
        return self.dsn or None


@dataclass(slots=True)
class PackConfig:
    """Rules for issuing shareable packs."""

    base_url: str = "http://localhost:3000"
    ttl_days: int = 7
    token_bytes: int = 12
    rarity_weights: Mapping[str, float] = field(default_factory=dict)

    def link_for(self, token: str) -> str:
        return f"{self.base_url.rstrip('/')}/open/{token}"


@dataclass(slots=True)
class RevealTiming:
    """UX tuning constants for the reveal sequence, in milliseconds."""

    slide_in_per_card_ms: int = 140
    slide_in_offset_ms: int = 400
    per_card_interval_ms: int = 700
    settle_ms: int = 500

    def slide_in_ms(self, card_count: int) -> int:
        return card_count * self.slide_in_per_card_ms + self.slide_in_offset_ms


@dataclass(slots=True)
class ChorePackConfig:
    """Top-level configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    packs: PackConfig = field(default_factory=PackConfig)
    reveal: RevealTiming = field(default_factory=RevealTiming)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "ChorePackConfig":
        """Create config from environment variables prefixed with CHOREPACK_."""
        prefix = "CHOREPACK_"
        storage_backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        if storage_backend not in {"memory", "sqlalchemy"}:
            raise ValueError(f"Unsupported storage backend {storage_backend}")
        dsn = os.getenv(f"{prefix}STORAGE_DSN") or None
        echo_sql = os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY

        pack_config = PackConfig(
            base_url=os.getenv(f"{prefix}BASE_URL", "http://localhost:3000"),
            ttl_days=int(os.getenv(f"{prefix}PACK_TTL_DAYS", "7")),
            token_bytes=int(os.getenv(f"{prefix}TOKEN_BYTES", "12")),
            rarity_weights=_parse_rarity_weights(os.getenv(f"{prefix}RARITY_WEIGHTS")),
        )

        reveal = RevealTiming(
            slide_in_per_card_ms=int(os.getenv(f"{prefix}REVEAL_SLIDE_IN_PER_CARD_MS", "140")),
            slide_in_offset_ms=int(os.getenv(f"{prefix}REVEAL_SLIDE_IN_OFFSET_MS", "400")),
            per_card_interval_ms=int(os.getenv(f"{prefix}REVEAL_PER_CARD_MS", "700")),
            settle_ms=int(os.getenv(f"{prefix}REVEAL_SETTLE_MS", "500")),
        )

        return cls(
            storage=StorageConfig(backend=storage_backend, dsn=dsn, echo_sql=echo_sql),
            packs=pack_config,
            reveal=reveal,
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )


def _parse_rarity_weights(raw: str | None) -> Mapping[str, float]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON for CHOREPACK_RARITY_WEIGHTS") from exc
    if not isinstance(data, dict):
        raise ValueError("CHOREPACK_RARITY_WEIGHTS must be a JSON object")
    return {str(k).upper(): float(v) for k, v in data.items()}
