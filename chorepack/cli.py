"""Command line helpers for chorepack."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.table import Table

from .app import ChorePackApp
from .config import ChorePackConfig
from .diagnostics.draw_simulator import DrawSimulator
from .domain.cards import Rarity, weights_from_config
from .domain.exceptions import ChorePackError, GenerationAborted
from .domain.reveal import Phase, RevealSession
from .loaders import load_deck_from_json, parse_deck_dict, validate_deck_file
from .validators import validate_app, validate_rarity_weights

console = Console()

RARITY_STYLES = {
    Rarity.COMMON: "grey70",
    Rarity.UNCOMMON: "green",
    Rarity.RARE: "magenta",
    Rarity.LEGENDARY: "bold orange1",
}

# Stand-in for the tear animation when opening a pack in the terminal.
TERMINAL_OPEN_SECONDS = 0.6


def run_generate() -> None:
    parser = argparse.ArgumentParser(description="Generate chore packs and print their links")
    parser.add_argument("--players", type=int, default=1, help="Number of players")
    parser.add_argument("--cards", type=int, default=3, help="Cards per player")
    parser.add_argument("--deck", type=Path, help="Deck JSON to load before generating")
    _add_verbose(parser)
    args = parser.parse_args()
    _configure_logging(args.verbose)
    sys.exit(asyncio.run(_generate(args.players, args.cards, args.deck)))


async def _generate(players: int, cards: int, deck: Path | None) -> int:
    app = ChorePackApp(ChorePackConfig.from_env())
    try:
        await app.init_backend()
        if deck:
            try:
                await load_deck_from_json(app, deck)
            except (OSError, ValueError, ChorePackError) as exc:
                console.print(f"[red]Could not load deck {deck}:[/red] {exc}")
                return 1
        try:
            packs = await app.generation.generate(players, cards)
        except GenerationAborted as exc:
            packs = list(exc.issued)
            console.print(f"[red]Stopped at player {exc.player_index}:[/red] {exc}")
        except ChorePackError as exc:
            console.print(f"[red]Could not generate packs:[/red] {exc}")
            return 1

        table = Table(title="Chore packs")
        table.add_column("Player")
        table.add_column("Cards")
        table.add_column("Link")
        for pack in packs:
            titles = ", ".join(
                f"[{RARITY_STYLES[card.rarity]}]{card.title}[/]" for card in pack.cards
            )
            table.add_row(str(pack.player_index), titles, pack.link)
        console.print(table)
        return 0 if len(packs) == players else 1
    finally:
        await app.close()


def run_open() -> None:
    parser = argparse.ArgumentParser(description="Open a chore pack in the terminal")
    parser.add_argument("token", help="Pack token (the last segment of the link)")
    _add_verbose(parser)
    args = parser.parse_args()
    _configure_logging(args.verbose)
    sys.exit(asyncio.run(_open(args.token.rstrip("/").rsplit("/", 1)[-1])))


async def _open(token: str) -> int:
    app = ChorePackApp(ChorePackConfig.from_env())
    finished = asyncio.Event()
    shown: set[int] = set()

    def render(session: RevealSession) -> None:
        for index, (card, revealed) in enumerate(zip(session.cards, session.revealed)):
            if revealed and index not in shown:
                shown.add(index)
                style = RARITY_STYLES[card.rarity]
                console.print(f"  [{style}]{card.rarity.value:<9}[/] {card.title}")
                if card.flavour_text:
                    console.print(f"            [italic]{card.flavour_text}[/italic]")
        if session.phase is Phase.REVEALING and not shown:
            console.print("Revealing your cards...")
        if session.phase.terminal:
            finished.set()

    machine = app.reveal(on_change=render)
    try:
        await app.init_backend()
        console.print("Loading pack...")
        phase = await machine.load(token)
        if phase is Phase.EXPIRED:
            console.print("[bold]Pack expired[/bold]")
            console.print("This link has expired or doesn't exist. Ask for a new one.")
            return 1

        await asyncio.to_thread(
            console.input,
            f"Sealed pack with {len(machine.session.cards)} card(s). Press Enter to open ",
        )
        machine.open()
        await asyncio.sleep(TERMINAL_OPEN_SECONDS)
        machine.animation_complete()
        await finished.wait()
        console.print("[bold]Your chores[/bold] - good luck!")
        return 0
    finally:
        machine.teardown()
        await app.close()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="Check rarity frequencies for a deck")
    parser.add_argument("deck", type=Path, help="Deck JSON file")
    parser.add_argument("--draws", type=int, default=100_000, help="Number of draws to simulate")
    args = parser.parse_args()

    config = ChorePackConfig.from_env()
    weights = weights_from_config(config.packs.rarity_weights)
    rng = Random(config.rng_seed) if config.rng_seed is not None else None
    pool = parse_deck_dict(_read_json(args.deck))
    result = DrawSimulator(rng=rng, weights=weights).simulate(pool, draws=args.draws)

    table = Table(title=f"{result.draws} simulated draws")
    table.add_column("Rarity")
    table.add_column("Expected", justify="right")
    table.add_column("Observed", justify="right")
    for rarity, share in result.expected.items():
        table.add_row(rarity.value, f"{share:.2%}", f"{result.frequency(rarity):.2%}")
    console.print(table)
    console.print(f"Max deviation: {result.max_deviation():.2%}")


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="chorepack validator")
    parser.add_argument("--deck", type=Path, help="Deck JSON file to validate")
    args = parser.parse_args()

    if args.deck:
        errors = validate_deck_file(args.deck)
        if errors:
            console.print("[red]Deck errors:[/red]")
            for err in errors:
                console.print(f"- {err}")
            sys.exit(1)
        console.print("Deck is valid [green]OK[/green]")
        return

    issues = asyncio.run(_validate_configured_app())
    if issues:
        console.print("[red]Configuration problems:[/red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("Configuration is valid [green]OK[/green]")


async def _validate_configured_app() -> list[str]:
    config = ChorePackConfig.from_env()
    weight_errors = validate_rarity_weights(config.packs.rarity_weights)
    if weight_errors:
        return weight_errors
    app = ChorePackApp(config)
    try:
        await app.init_backend()
        return await validate_app(app)
    finally:
        await app.close()


def _read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
