"""Rich terminal frontend — tubes as a styled table, line-based commands.

Commands during play::

    1 3        move the top ball of tube 1 onto tube 3
    u [n]      undo one move (or up to n)
    r [n]      redo one move (or up to n)
    h [kind]   hint: simple, advanced, strategic or tutorial
    q          back / quit

After a win, ``u [n]`` on the end screen takes moves back and resumes play.
"""

from __future__ import annotations

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from ballsort.config import EngineConfig
from ballsort.engine.gameplay import GamePlay, IllegalMove
from ballsort.engine.gamesolver import HintResult, HintType
from ballsort.engine.gamestate import GameStatus
from ballsort.engine.service import BallSortEngine
from ballsort.models.board import Board
from ballsort.models.level import GeneratedLevel
from ballsort.models.palette import hex_for

console = Console()


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def format_steps(hint: HintResult) -> str:
    return ", ".join(f"{s.from_tube_id}→{s.to_tube_id}" for s in hint.moves)


# -- board rendering ----------------------------------------------------------


def render_board(board: Board) -> Table:
    """Return a Rich Table with one column per tube, top slot first."""
    table = Table(
        show_header=True,
        header_style="bold cyan",
        show_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for tube in board.tubes:
        style = "bold green" if tube.is_complete else "bold white"
        table.add_column(f"[{style}]{tube.id}[/{style}]", justify="center")

    depth = max(t.capacity for t in board.tubes)
    for slot in range(depth - 1, -1, -1):
        cells: list[str] = []
        for tube in board.tubes:
            if slot < tube.count:
                color = tube.balls[slot].color
                cells.append(f"[{hex_for(color)}]●[/]")
            elif slot < tube.capacity:
                cells.append("[dim]·[/dim]")
            else:
                cells.append(" ")
        table.add_row(*cells)
    return table


# -- game screens -------------------------------------------------------------


def _draw_game(game: GamePlay, level: GeneratedLevel, status: str = "") -> None:
    console.clear()

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.state.moves_count), style="bold yellow")
    stats.append("    Hints: ", style="dim")
    stats.append(str(game.state.hints_used), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(game.state.elapsed_time), style="bold yellow")
    stats.append("    Target: ", style="dim")
    stats.append(f"~{level.minimum_move_estimate}", style="bold yellow")

    controls = Text()
    controls.append("  <from> <to>", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("u", style="bold cyan")
    controls.append("  undo   ", style="dim")
    controls.append("r", style="bold cyan")
    controls.append("  redo   ", style="dim")
    controls.append("h [kind]", style="bold cyan")
    controls.append("  hint   ", style="dim")
    controls.append("q", style="bold cyan")
    controls.append("  quit", style="dim")

    tier = level.parameters.difficulty_tier.value
    panel = Panel(
        Align.center(render_board(game.board)),
        title=f"[bold cyan]Level {level.level_number}  ({tier})[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_end(game: GamePlay, level: GeneratedLevel) -> None:
    console.clear()
    check = game.check_state()
    won = game.state.status is GameStatus.COMPLETED

    banner = Text()
    if won:
        banner.append("\n  ★ ", style="bold yellow")
        banner.append("CONGRATULATIONS!", style="bold green")
        banner.append(f"  {check.message}  ", style="green")
        banner.append("★\n", style="bold yellow")
    else:
        banner.append("\n  STUCK  ", style="bold red")
        banner.append(f"{check.message}\n", style="red")

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.state.moves_count), style="bold yellow")
    stats.append("    Hints: ", style="dim")
    stats.append(str(game.state.hints_used), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(game.state.elapsed_time), style="bold yellow")

    border = "bold green" if won else "bold red"
    panel = Panel(
        Group(
            Align.center(render_board(game.board)),
            Align.center(banner),
            Align.center(stats),
        ),
        title=f"[{border}]Level {level.level_number}[/{border}]",
        border_style=border,
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- command handling ---------------------------------------------------------


def _count(args: list[str]) -> int:
    return int(args[0]) if args and args[0].isdigit() else 1


def _handle(game: GamePlay, line: str) -> str | None:
    """Apply one command line; returns a status message, ``None`` to quit."""
    parts = line.split()
    if not parts:
        return ""
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("q", "quit"):
        return None
    if cmd in ("u", "undo"):
        n = _count(args)
        undone = game.undo_many(n) if n > 1 else int(game.undo())
        return f"[cyan]Undid {undone} move(s).[/cyan]" if undone else "[yellow]Nothing to undo.[/yellow]"
    if cmd in ("r", "redo"):
        redone = game.redo(_count(args))
        return f"[cyan]Redid {redone} move(s).[/cyan]" if redone else "[yellow]Nothing to redo.[/yellow]"
    if cmd in ("h", "hint"):
        try:
            kind = HintType(args[0].lower()) if args else HintType.SIMPLE
        except ValueError:
            return f"[red]Unknown hint kind {args[0]!r}.[/red]"
        hint = game.hint(kind)
        if hint is None:
            return "[yellow]No hint available.[/yellow]"
        message = f"[cyan]Hint ({hint.kind.value}):[/cyan] [bold]{format_steps(hint)}[/bold]"
        if hint.explanation:
            message += f"  [dim]{hint.explanation}[/dim]"
        return message

    if len(parts) == 2 and all(p.isdigit() for p in parts):
        result = game.execute_move(int(parts[0]), int(parts[1]))
        if isinstance(result, IllegalMove):
            return f"[red]Illegal move:[/red] {result.reason}"
        return ""
    return f"[red]Unknown command {line!r}.[/red]"


# -- game loop ----------------------------------------------------------------


def _reopen(game: GamePlay, line: str) -> bool:
    """End-screen command: ``u [n]`` takes back moves of a won game."""
    parts = line.split()
    if not parts or parts[0].lower() not in ("u", "undo"):
        return False
    n = _count(parts[1:])
    undone = game.undo_many(n) if n > 1 else int(game.undo())
    return undone > 0 and game.state.status is GameStatus.IN_PROGRESS


def play(engine: BallSortEngine, level: GeneratedLevel) -> GamePlay:
    game = engine.start_game(level)
    status = ""

    while True:
        while game.state.status is GameStatus.IN_PROGRESS:
            _draw_game(game, level, status)
            line = Prompt.ask("  [bold cyan]>[/bold cyan]", console=console, default="")
            result = _handle(game, line)
            if result is None:
                return game
            status = result

        _draw_end(game, level)
        # Only a won game can be undone.
        if game.state.status is not GameStatus.COMPLETED:
            return game
        line = Prompt.ask(
            "  [bold cyan]u[/bold cyan] [dim]undo,[/dim] [bold cyan]Enter[/bold cyan] [dim]quit[/dim]",
            console=console,
            default="",
        )
        if not _reopen(game, line):
            return game
        status = "[cyan]Back in play.[/cyan]"


# -- public entry point -------------------------------------------------------


def run(level_number: int, seed: int | None, config: EngineConfig) -> None:
    """Launch an interactive game of *level_number*."""
    engine = BallSortEngine(config=config)
    level = engine.generate_level(level_number, seed)
    play(engine, level)
