import asyncio

import pytest

from chorepack.app import ChorePackApp
from chorepack.config import ChorePackConfig, RevealTiming
from chorepack.domain.cards import Card, Rarity
from chorepack.domain.exceptions import InvalidInput, InvalidTransition, StorageError
from chorepack.domain.reveal import Phase, StepKind, build_reveal_schedule


async def seed_pack(app, count=3):
    cards = [
        await app.card_store.save(Card(title=f"Chore {idx}", rarity=Rarity.COMMON))
        for idx in range(count)
    ]
    return await app.pack_service.create_pack([card.card_id for card in cards])


def test_schedule_offsets_for_three_cards():
    steps = build_reveal_schedule(3, RevealTiming())
    assert [(step.delay_ms, step.kind, step.index) for step in steps] == [
        (820, StepKind.BEGIN_REVEAL, None),
        (820, StepKind.FLIP, 0),
        (1520, StepKind.FLIP, 1),
        (2220, StepKind.FLIP, 2),
        (3420, StepKind.FINISH, None),
    ]


def test_slide_in_grows_with_card_count():
    timing = RevealTiming()
    delays = [timing.slide_in_ms(count) for count in range(1, 6)]
    assert delays == sorted(delays)
    assert timing.slide_in_ms(0) == 400


@pytest.mark.asyncio()
async def test_full_reveal_sequence(memory_app, manual_scheduler):
    token = await seed_pack(memory_app)
    opened = []
    snapshots = []
    machine = memory_app.reveal(
        on_change=lambda session: snapshots.append((session.phase, list(session.revealed))),
        on_open=lambda: opened.append(True),
    )
    assert machine.phase is Phase.LOADING

    assert await machine.load(token) is Phase.SEALED
    assert machine.session.revealed == [False, False, False]

    machine.open()
    assert machine.phase is Phase.OPENING
    assert opened == [True]

    machine.animation_complete()
    manual_scheduler.advance_ms(819)
    assert machine.phase is Phase.OPENING

    manual_scheduler.advance_ms(1)
    assert machine.phase is Phase.REVEALING
    assert machine.session.revealed == [True, False, False]

    manual_scheduler.advance_ms(700)
    assert machine.session.revealed == [True, True, False]

    manual_scheduler.advance_ms(700)
    assert machine.session.revealed == [True, True, True]
    assert machine.phase is Phase.REVEALING

    manual_scheduler.advance_ms(1199)
    assert machine.phase is Phase.REVEALING
    manual_scheduler.advance_ms(1)
    assert machine.phase is Phase.DONE

    manual_scheduler.advance_ms(10_000)
    assert machine.phase is Phase.DONE
    assert manual_scheduler.pending == 0

    flags = [revealed for _, revealed in snapshots]
    assert [True, False, True] not in flags
    assert [False, True, False] not in flags
    assert snapshots[-1] == (Phase.DONE, [True, True, True])


@pytest.mark.asyncio()
async def test_teardown_mid_reveal_stops_flips(memory_app, manual_scheduler):
    token = await seed_pack(memory_app)
    machine = memory_app.reveal()
    await machine.load(token)
    machine.open()
    machine.animation_complete()

    manual_scheduler.advance_ms(820)
    assert machine.session.revealed == [True, False, False]

    machine.teardown()
    manual_scheduler.advance_ms(60_000)
    assert machine.session.revealed == [True, False, False]
    assert machine.phase is Phase.REVEALING
    assert manual_scheduler.pending == 0


@pytest.mark.asyncio()
async def test_teardown_before_animation_completes(memory_app):
    token = await seed_pack(memory_app)
    machine = memory_app.reveal()
    await machine.load(token)
    machine.open()
    machine.teardown()
    with pytest.raises(InvalidTransition):
        machine.animation_complete()


@pytest.mark.asyncio()
async def test_unknown_token_expires(memory_app):
    machine = memory_app.reveal()
    assert await machine.load("nope") is Phase.EXPIRED
    assert machine.session.cards == ()
    with pytest.raises(InvalidTransition):
        machine.open()


@pytest.mark.asyncio()
async def test_storage_failure_expires(memory_app):
    async def broken(token, now):
        raise StorageError("connection reset")

    memory_app.pack_store.get_active = broken
    machine = memory_app.reveal()
    assert await machine.load("whatever") is Phase.EXPIRED


@pytest.mark.asyncio()
async def test_any_lookup_failure_expires(memory_app):
    async def broken(token):
        raise InvalidInput("malformed pack")

    memory_app.pack_service.get_pack = broken
    machine = memory_app.reveal()
    assert await machine.load("whatever") is Phase.EXPIRED


@pytest.mark.asyncio()
async def test_empty_pack_expires(memory_app):
    token = await memory_app.pack_service.create_pack([])
    machine = memory_app.reveal()
    assert await machine.load(token) is Phase.EXPIRED


@pytest.mark.asyncio()
async def test_out_of_order_triggers_are_rejected(memory_app):
    token = await seed_pack(memory_app, count=1)
    machine = memory_app.reveal()
    with pytest.raises(InvalidTransition):
        machine.open()
    await machine.load(token)
    with pytest.raises(InvalidTransition):
        machine.animation_complete()
    with pytest.raises(InvalidTransition):
        await machine.load(token)


@pytest.mark.asyncio()
async def test_reveal_runs_on_the_event_loop():
    timing = RevealTiming(
        slide_in_per_card_ms=1, slide_in_offset_ms=5, per_card_interval_ms=10, settle_ms=5
    )
    app = ChorePackApp(ChorePackConfig(reveal=timing))
    token = await seed_pack(app, count=2)
    done = asyncio.Event()
    machine = app.reveal(on_change=lambda session: session.phase is Phase.DONE and done.set())

    await machine.load(token)
    machine.open()
    machine.animation_complete()
    await asyncio.wait_for(done.wait(), timeout=2)
    assert machine.session.revealed == [True, True]
