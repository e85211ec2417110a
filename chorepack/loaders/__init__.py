"""Loaders for declarative deck definitions."""

from .json_loader import (
    load_deck_from_json,
    parse_deck_dict,
    validate_deck_dict,
    validate_deck_file,
)

__all__ = [
    "load_deck_from_json",
    "parse_deck_dict",
    "validate_deck_dict",
    "validate_deck_file",
]
