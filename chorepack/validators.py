"""Validation utilities for chorepack applications."""

from __future__ import annotations

from typing import Mapping

from .app import ChorePackApp
from .domain.cards import Rarity


def validate_rarity_weights(weights: Mapping[str, float]) -> list[str]:
    """Check a ``{"RARE": 0.15}``-style table: known rarities, positive weights."""
    errors: list[str] = []
    for rarity_code, weight in weights.items():
        if str(rarity_code).upper() not in Rarity.__members__:
            errors.append(f"Rarity weight table contains invalid rarity '{rarity_code}'.")
        if weight is None or weight <= 0:
            errors.append(f"Rarity weight for '{rarity_code}' must be positive.")
    return errors


async def validate_app(app: ChorePackApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []

    errors.extend(
        validate_rarity_weights({rarity.value: weight for rarity, weight in app.weights.items()})
    )

    packs = app.config.packs
    if packs.ttl_days <= 0:
        errors.append(f"Pack TTL must be positive, got {packs.ttl_days} day(s).")
    if packs.token_bytes < 8:
        errors.append(f"Pack tokens need at least 8 bytes of entropy, got {packs.token_bytes}.")
    if not packs.base_url.startswith(("http://", "https://")):
        errors.append(f"Base URL '{packs.base_url}' must start with http:// or https://.")

    timing = app.config.reveal
    for name in ("slide_in_per_card_ms", "slide_in_offset_ms", "per_card_interval_ms", "settle_ms"):
        if getattr(timing, name) < 0:
            errors.append(f"Reveal timing '{name}' cannot be negative.")

    cards = await app.card_store.list_cards()
    if not cards:
        errors.append("Deck does not contain any cards.")
    for card in cards:
        if not card.title.strip():
            errors.append(f"Card '{card.card_id}' has an empty title.")

    return errors


__all__ = ["validate_app", "validate_rarity_weights"]
