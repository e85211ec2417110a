import json
from pathlib import Path

import pytest

from chorepack.app import ChorePackApp
from chorepack.config import ChorePackConfig
from chorepack.domain.cards import Rarity
from chorepack.loaders import (
    load_deck_from_json,
    parse_deck_dict,
    validate_deck_dict,
    validate_deck_file,
)


def test_parse_deck_dict_supports_optional_fields():
    data = {
        "cards": [
            {
                "title": "Clean the fridge",
                "rarity": "rare",
                "flavourText": "Something is growing in there",
                "timeEstimate": "30 min",
                "frequency": "Monthly",
                "imageUrl": "https://example.com/fridge.png",
            },
            {"title": "Make the bed"},
        ]
    }
    fridge, bed = parse_deck_dict(data)
    assert fridge.rarity is Rarity.RARE
    assert fridge.flavour_text == "Something is growing in there"
    assert fridge.image_url == "https://example.com/fridge.png"
    assert fridge.card_id is None
    assert bed.rarity is Rarity.COMMON
    assert bed.time_estimate is None


def test_parse_deck_dict_invalid_rarity_raises():
    with pytest.raises(ValueError):
        parse_deck_dict({"cards": [{"title": "Iron shirts", "rarity": "mythic"}]})


def test_validate_deck_dict_reports_every_problem():
    errors = validate_deck_dict(
        {
            "cards": [
                {"title": "", "rarity": "COMMON"},
                {"id": "a", "title": "Dust"},
                {"id": "a", "title": "Sweep", "frequency": 7},
                "not a card",
            ]
        }
    )
    assert any("non-empty 'title'" in err for err in errors)
    assert any("defined multiple times" in err for err in errors)
    assert any("'frequency' must be a string" in err for err in errors)
    assert any("Card #4 must be an object" in err for err in errors)


def test_validate_deck_dict_requires_cards():
    assert validate_deck_dict({"cards": []}) == ["Deck must contain non-empty 'cards' array."]
    assert validate_deck_dict([]) == ["Deck must be a JSON object."]


def test_validate_deck_file_rejects_bad_json(tmp_path: Path):
    path = tmp_path / "deck.json"
    path.write_text("{not json", encoding="utf-8")
    assert validate_deck_file(path)[0].startswith("Deck file is not valid JSON")


@pytest.mark.asyncio()
async def test_load_deck_from_json_saves_cards(tmp_path: Path):
    payload = {
        "cards": [
            {"title": "Feed the cat", "rarity": "UNCOMMON"},
            {"title": "Deep clean bathroom", "rarity": "LEGENDARY"},
        ]
    }
    json_path = tmp_path / "deck.json"
    json_path.write_text(json.dumps(payload), encoding="utf-8")

    app = ChorePackApp(ChorePackConfig())
    saved = await load_deck_from_json(app, json_path)

    assert all(card.card_id for card in saved)
    titles = {card.title for card in await app.card_store.list_cards()}
    assert titles == {"Feed the cat", "Deep clean bathroom"}
