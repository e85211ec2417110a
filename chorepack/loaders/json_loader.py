"""Load a deck of chore cards from a JSON definition."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, TYPE_CHECKING

from ..domain.cards import Card, Rarity

if TYPE_CHECKING:
    from ..app import ChorePackApp

_OPTIONAL_TEXT_FIELDS = ("flavourText", "timeEstimate", "frequency", "imageUrl")


async def load_deck_from_json(app: "ChorePackApp", path: str | Path) -> list[Card]:
    """Read a deck file and save every card into the app's card store."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    cards = parse_deck_dict(data)
    return [await app.card_store.save(card) for card in cards]


def parse_deck_dict(data: dict[str, Any]) -> list[Card]:
    """Parse a decoded deck dict into cards."""
    errors = validate_deck_dict(data)
    if errors:
        raise ValueError(_format_errors("Deck validation failed", errors))
    return [parse_card(entry) for entry in data["cards"]]


def parse_card(entry: dict[str, Any]) -> Card:
    return Card(
        card_id=entry.get("id"),
        title=entry["title"].strip(),
        rarity=Rarity(entry.get("rarity", Rarity.COMMON.value).upper()),
        flavour_text=entry.get("flavourText") or "",
        time_estimate=entry.get("timeEstimate") or None,
        frequency=entry.get("frequency") or None,
        image_url=entry.get("imageUrl") or None,
    )


def validate_deck_file(path: str | Path) -> list[str]:
    """Validate deck JSON file and return a list of errors."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        return [f"Deck file is not valid JSON: {exc}"]
    return validate_deck_dict(data)


def validate_deck_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Deck must be a JSON object."]
    errors: list[str] = []

    cards_raw = data.get("cards")
    if not isinstance(cards_raw, list) or not cards_raw:
        errors.append("Deck must contain non-empty 'cards' array.")
        return errors

    card_ids: set[str] = set()
    for idx, entry in enumerate(cards_raw, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Card #{idx} must be an object.")
            continue

        title = entry.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append(f"Card #{idx} must define non-empty 'title'.")
        label = title.strip() if isinstance(title, str) and title.strip() else f"#{idx}"

        card_id = entry.get("id")
        if card_id is not None:
            if not isinstance(card_id, str) or not card_id.strip():
                errors.append(f"Card '{label}' has invalid 'id' value '{card_id}'.")
            elif card_id in card_ids:
                errors.append(f"Card id '{card_id}' defined multiple times.")
            else:
                card_ids.add(card_id)

        rarity_value = entry.get("rarity", Rarity.COMMON.value)
        if not isinstance(rarity_value, str) or rarity_value.upper() not in Rarity.__members__:
            errors.append(f"Card '{label}' has invalid rarity '{rarity_value}'.")

        for field_name in _OPTIONAL_TEXT_FIELDS:
            value = entry.get(field_name)
            if value is not None and not isinstance(value, str):
                errors.append(f"Card '{label}' field '{field_name}' must be a string.")

    return errors


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
