#!/usr/bin/env python3
"""Ball-sort puzzle engine.

Usage::

    ballsort generate 12 --seed 7       # print a level and its board
    ballsort validate "T1=0,1;T2=1,0;T3="
    ballsort hint "T1=0,1;T2=1,0;T3=" -k strategic
    ballsort play 5                     # interactive Rich terminal game
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ballsort.config import load_config
from ballsort.engine.gamesolver import HintType, Solver
from ballsort.engine.service import BallSortEngine
from frontend.cli.rich import app as rich_app

console = Console()


# -- helpers ------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _engine(config: Optional[Path]) -> BallSortEngine:
    try:
        return BallSortEngine(config=load_config(config))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, help="Ball-sort puzzle engine.")

_CONFIG_OPTION = typer.Option(
    None, "-c", "--config", help="TOML file with an [engine] table.",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging."),
) -> None:
    """Ball-sort puzzle engine."""
    _setup_logging(verbose)


@app.command()
def generate(
    level: int = typer.Argument(..., min=1, help="Level number."),
    seed: Optional[int] = typer.Option(None, "-s", "--seed", help="Generation seed."),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Generate a level and print its compact board."""
    engine = _engine(config)
    generated = engine.generate_level(level, seed)
    board = engine.load_board(
        generated.compact_initial_state, generated.parameters.capacity
    )
    params = generated.parameters

    console.print(
        f"[bold cyan]Level {level}[/bold cyan] ({params.difficulty_tier.value}): "
        f"{params.color_count} colors, {params.tube_count} tubes, "
        f"{params.balls_per_color} balls/color, seed {generated.generation_seed}"
    )
    if board is not None:
        console.print(rich_app.render_board(board))
    console.print(generated.compact_initial_state, highlight=False)
    console.print(
        f"[dim]~{generated.minimum_move_estimate} moves "
        f"({generated.scramble_moves_applied} scramble moves)[/dim]"
    )


@app.command()
def validate(
    state: str = typer.Argument(..., help="Compact or legacy JSON board."),
) -> None:
    """Sanity-check a stored board (uniform ball count per color)."""
    ok = BallSortEngine().validate_level(state)
    console.print("[green]valid[/green]" if ok else "[red]invalid[/red]")
    raise typer.Exit(code=0 if ok else 1)


@app.command()
def hint(
    state: str = typer.Argument(..., help="Compact or legacy JSON board."),
    kind: HintType = typer.Option(HintType.SIMPLE, "-k", "--kind", help="Hint kind."),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Suggest moves for a board."""
    engine = _engine(config)
    board = engine.load_board(state)
    if board is None:
        console.print("[red]Malformed board.[/red]")
        raise typer.Exit(code=2)

    result = Solver.hint(board, kind, engine.config)
    if result is None:
        console.print("[yellow]No hint available.[/yellow]")
        return
    console.print(f"[cyan]{result.kind.value}[/cyan]: [bold]{rich_app.format_steps(result)}[/bold]")
    if result.explanation:
        console.print(f"[dim]{result.explanation}[/dim]")


@app.command()
def play(
    level: int = typer.Argument(1, min=1, help="Level number."),
    seed: Optional[int] = typer.Option(None, "-s", "--seed", help="Generation seed."),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Play a level in the Rich terminal frontend."""
    rich_app.run(level_number=level, seed=seed, config=_engine(config).config)


if __name__ == "__main__":
    app()
