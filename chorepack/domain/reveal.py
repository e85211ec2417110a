"""Client-side state machine for opening a pack."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from .cards import Card
from .exceptions import ChorePackError, InvalidTransition
from .packs import PackService
from .timeline import AsyncioScheduler, Scheduler, Timeline, TimelineEntry
from ..config import RevealTiming

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING = "loading"
    SEALED = "sealed"
    OPENING = "opening"
    REVEALING = "revealing"
    DONE = "done"
    EXPIRED = "expired"

    @property
    def terminal(self) -> bool:
        return self in (Phase.DONE, Phase.EXPIRED)


class StepKind(str, Enum):
    BEGIN_REVEAL = "begin_reveal"
    FLIP = "flip"
    FINISH = "finish"


@dataclass(frozen=True, slots=True)
class RevealStep:
    delay_ms: int
    kind: StepKind
    index: int | None = None


def build_reveal_schedule(card_count: int, timing: RevealTiming) -> list[RevealStep]:
    """Offsets are measured from the moment the opening animation completes."""
    slide_in = timing.slide_in_ms(card_count)
    steps = [RevealStep(slide_in, StepKind.BEGIN_REVEAL)]
    steps.extend(
        RevealStep(slide_in + index * timing.per_card_interval_ms, StepKind.FLIP, index)
        for index in range(card_count)
    )
    steps.append(
        RevealStep(
            slide_in + card_count * timing.per_card_interval_ms + timing.settle_ms,
            StepKind.FINISH,
        )
    )
    return steps


@dataclass(slots=True)
class RevealSession:
    phase: Phase = Phase.LOADING
    cards: tuple[Card, ...] = ()
    revealed: list[bool] = field(default_factory=list)

    @property
    def all_revealed(self) -> bool:
        return bool(self.revealed) and all(self.revealed)


SessionListener = Callable[[RevealSession], None]


class RevealStateMachine:
    """Drive one page view through loading, sealed, opening, revealing and done."""

    def __init__(
        self,
        packs: PackService,
        *,
        timing: RevealTiming | None = None,
        scheduler: Scheduler | None = None,
        on_change: SessionListener | None = None,
        on_open: Callable[[], None] | None = None,
    ) -> None:
        self._packs = packs
        self._timing = timing or RevealTiming()
        self._scheduler = scheduler or AsyncioScheduler()
        self._on_change = on_change
        self._on_open = on_open
        self._session = RevealSession()
        self._timeline: Timeline | None = None
        self._torn_down = False

    @property
    def session(self) -> RevealSession:
        return self._session

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    async def load(self, token: str) -> Phase:
        self._require(Phase.LOADING, "load")
        try:
            cards: Sequence[Card] = await self._packs.get_pack(token)
        except ChorePackError as exc:
            logger.info("Pack %s cannot be opened: %s", token, exc)
            cards = ()
        if self._torn_down:
            return self.phase

        if not cards:
            self._set_phase(Phase.EXPIRED)
            return self.phase
        self._session.cards = tuple(cards)
        self._session.revealed = [False] * len(cards)
        self._set_phase(Phase.SEALED)
        return self.phase

    def open(self) -> None:
        """User pressed "open pack": start the tear animation."""
        self._require(Phase.SEALED, "open")
        self._set_phase(Phase.OPENING)
        if self._on_open is not None:
            self._on_open()

    def animation_complete(self) -> None:
        """The opening animation finished; slide the cards in and reveal them."""
        self._require(Phase.OPENING, "finish opening")
        schedule = build_reveal_schedule(len(self._session.cards), self._timing)
        self._timeline = Timeline(
            self._scheduler,
            [TimelineEntry(step.delay_ms, self._action_for(step)) for step in schedule],
        )
        self._timeline.start()

    def teardown(self) -> None:
        """Cancel every pending reveal step; nothing fires afterwards."""
        self._torn_down = True
        if self._timeline is not None:
            self._timeline.cancel()
            self._timeline = None

    def _action_for(self, step: RevealStep) -> Callable[[], None]:
        if step.kind is StepKind.BEGIN_REVEAL:
            return lambda: self._set_phase(Phase.REVEALING)
        if step.kind is StepKind.FLIP:
            index = step.index
            assert index is not None
            return lambda: self._flip(index)
        return self._finish

    def _flip(self, index: int) -> None:
        revealed = self._session.revealed
        if index > 0 and not revealed[index - 1]:
            raise RuntimeError(f"Card {index} flipped before card {index - 1}")
        revealed[index] = True
        self._notify()

    def _finish(self) -> None:
        if self._session.all_revealed:
            self._set_phase(Phase.DONE)

    def _set_phase(self, phase: Phase) -> None:
        logger.debug("Reveal phase %s -> %s", self._session.phase.value, phase.value)
        self._session.phase = phase
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._session)

    def _require(self, phase: Phase, action: str) -> None:
        if self._torn_down:
            raise InvalidTransition(action, "torn down")
        if self._session.phase is not phase:
            raise InvalidTransition(action, self._session.phase.value)
