"""Exceptions raised by chorepack domain services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .generation import PlayerPack


class ChorePackError(RuntimeError):
    """Base class for domain exceptions."""


class InvalidInput(ChorePackError, ValueError):
    """Raised before any side effect when arguments are unusable."""


class EmptyPool(InvalidInput):
    """Raised when there are no cards to draw from."""


class StorageError(ChorePackError):
    """Raised when a persistence call fails."""


class StoreNotConfigured(StorageError):
    """Raised when the persistence backend has no usable configuration."""


class GenerationAborted(StorageError):
    """Raised when pack creation fails part-way through a generation run.

    Packs issued before the failure stay valid and are exposed on ``issued``.
    """

    def __init__(self, player_index: int, issued: Sequence["PlayerPack"]) -> None:
        super().__init__(
            f"Could not create pack for player {player_index}; "
            f"{len(issued)} pack(s) were already issued"
        )
        self.player_index = player_index
        self.issued = tuple(issued)


class PackNotFound(ChorePackError):
    """Raised when a token is unknown, expired, or references a deleted card."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Pack {token} not found or expired")
        self.token = token


class InvalidTransition(ChorePackError):
    """Raised when a reveal trigger does not apply to the current phase."""

    def __init__(self, action: str, phase: str) -> None:
        super().__init__(f"Cannot {action} while {phase}")
        self.action = action
        self.phase = phase
