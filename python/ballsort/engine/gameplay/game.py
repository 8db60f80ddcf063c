"""Core gameplay logic: legality, moves, undo/redo and termination."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from ballsort.config import DEFAULT_CONFIG, EngineConfig
from ballsort.engine.gamecache import BoardCache, NullBoardCache
from ballsort.engine.gamesolver import HintResult, HintType, Solver
from ballsort.engine.gamestate import GameState, GameStatus
from ballsort.models.board import Board, Color
from ballsort.models.codec import deserialize
from ballsort.models.level import GeneratedLevel
from ballsort.models.move import Move

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IllegalMove:
    """A rejected move. Returned, never raised."""

    from_tube_id: int
    to_tube_id: int
    reason: str


class EndReason(StrEnum):
    NONE = "none"
    VICTORY = "victory"
    NO_MOVES_LEFT = "no_moves_left"


@dataclass(frozen=True)
class StateCheck:
    is_game_over: bool
    is_won: bool
    end_reason: EndReason
    message: str = ""
    details: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Progress:
    completed_tubes: int
    mixed_tubes: int
    empty_tubes: int
    total_colors: int
    legal_moves: int
    moves_used: int
    hints_used: int
    percentage: int
    status: GameStatus


# -- board-level rules ----------------------------------------------------------


def can_move(board: Board, from_tube_id: int, to_tube_id: int) -> bool:
    return board.can_move(from_tube_id, to_tube_id)


def is_won(board: Board) -> bool:
    """Every tube is empty or complete."""
    return board.is_won()


def is_stuck(board: Board) -> bool:
    """No legal move exists and the board is not won.

    A solved board with no free space has no moves either; it counts as won.
    """
    return not board.is_won() and not board.has_legal_move()


def illegal_reason(board: Board, from_tube_id: int, to_tube_id: int) -> str | None:
    """Why ``from -> to`` is illegal, or ``None`` if it is legal."""
    if from_tube_id == to_tube_id:
        return "source and destination are the same tube"
    src = board.tube(from_tube_id)
    dst = board.tube(to_tube_id)
    if src is None or dst is None:
        return "unknown tube"
    if src.is_empty:
        return "source tube is empty"
    if dst.is_full:
        return "destination tube is full"
    if not dst.can_receive(src.balls[-1].color):
        return "top colors differ"
    return None


# -- game session -------------------------------------------------------------


class GamePlay:
    """Orchestrates a single game session.

    The caller serializes calls per game; every mutating call invalidates
    the game's entry in *cache*.
    """

    def __init__(
        self,
        state: GameState,
        config: EngineConfig = DEFAULT_CONFIG,
        cache: BoardCache | None = None,
    ) -> None:
        self.state = state
        self.config = config
        self.cache: BoardCache = cache if cache is not None else NullBoardCache()
        if not state.is_terminal:
            self._refresh_status()

    @classmethod
    def from_board(cls, board: Board, **kwargs) -> GamePlay:
        """Create a game session from an existing board (e.g. loaded from storage)."""
        return cls(GameState(board), **kwargs)

    @classmethod
    def from_level(cls, level: GeneratedLevel, **kwargs) -> GamePlay:
        board = deserialize(
            level.compact_initial_state, capacity=level.parameters.capacity
        )
        return cls(GameState(board), **kwargs)

    @property
    def board(self) -> Board:
        return self.state.board

    # -- moves ----------------------------------------------------------------

    def can_move(self, from_tube_id: int, to_tube_id: int) -> bool:
        return can_move(self.board, from_tube_id, to_tube_id)

    def execute_move(self, from_tube_id: int, to_tube_id: int) -> Move | IllegalMove:
        """Move the top ball of *from* onto *to*.

        Returns the new log entry, or an :class:`IllegalMove` when the move
        is rejected.
        """
        if self.state.is_terminal:
            return IllegalMove(from_tube_id, to_tube_id, "game is over")
        reason = illegal_reason(self.board, from_tube_id, to_tube_id)
        if reason is not None:
            logger.debug(
                "Rejected move %s -> %s in game %s: %s",
                from_tube_id, to_tube_id, self.state.game_id, reason,
            )
            return IllegalMove(from_tube_id, to_tube_id, reason)

        color = self.board.transfer(from_tube_id, to_tube_id)
        move = Move(
            from_tube_id=from_tube_id,
            to_tube_id=to_tube_id,
            ball_color=color,
            move_number=self.state.next_move_number(),
        )
        self.state.moves.append(move)
        logger.debug(
            "Move #%d in game %s: %s -> %s (color %s)",
            move.move_number, self.state.game_id, from_tube_id, to_tube_id, color,
        )
        self._refresh_status()
        self._invalidate()
        return move

    def undo(self) -> bool:
        """Undo the highest-numbered active move.

        A won game goes back to in-progress; a failed game stays failed.
        """
        if self.state.status is GameStatus.FAILED:
            return False
        active = [m for m in self.state.moves if not m.is_undone]
        if not active:
            return False
        move = max(active, key=lambda m: m.move_number)
        if not self._relocate(move.to_tube_id, move.from_tube_id, move.ball_color):
            logger.debug(
                "Cannot undo move #%d in game %s: board no longer matches",
                move.move_number, self.state.game_id,
            )
            return False

        move.is_undone = True
        if self.state.status is GameStatus.COMPLETED:
            self.state.reopen()
            logger.info("Game %s reopened by undo", self.state.game_id)
        logger.debug("Undid move #%d in game %s", move.move_number, self.state.game_id)
        self._invalidate()
        return True

    def undo_many(self, count: int) -> int:
        """Undo up to *count* moves, capped per call; returns how many were undone."""
        limit = min(count, self.config.max_undo_per_call)
        undone = 0
        while undone < limit and self.undo():
            undone += 1
        return undone

    def redo(self, count: int = 1) -> int:
        """Re-apply the *count* lowest-numbered undone moves, oldest first.

        An entry that is no longer legal (or whose ball color no longer sits
        on top of its source) is skipped and stays undone. Returns the number
        of moves re-applied.
        """
        if self.state.is_terminal or count <= 0:
            return 0
        pending = sorted(
            (m for m in self.state.moves if m.is_undone),
            key=lambda m: m.move_number,
        )[:count]

        redone = 0
        for move in pending:
            if self.state.is_terminal:
                break
            src = self.board.tube(move.from_tube_id)
            if (
                src is None
                or src.top_color() != move.ball_color
                or not self.board.can_move(move.from_tube_id, move.to_tube_id)
            ):
                logger.debug(
                    "Skipping redo of move #%d in game %s: no longer legal",
                    move.move_number, self.state.game_id,
                )
                continue
            self.board.transfer(move.from_tube_id, move.to_tube_id)
            move.is_undone = False
            redone += 1
            self._refresh_status()

        if redone:
            self._invalidate()
        return redone

    # -- hints ----------------------------------------------------------------

    def hint(self, kind: HintType = HintType.SIMPLE) -> HintResult | None:
        """Ask the solver for a hint; a non-empty answer counts as a used hint."""
        if self.state.is_terminal:
            return None
        result = Solver.hint(self.board, kind, self.config)
        if result is not None:
            self.state.hints_used += 1
            self._invalidate()
        return result

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return is_won(self.board)

    @property
    def is_stuck(self) -> bool:
        return is_stuck(self.board)

    def legal_moves(self) -> list[tuple[int, int]]:
        return self.board.legal_moves()

    def check_state(self) -> StateCheck:
        """Evaluate victory first, then defeat. Does not change the status."""
        board = self.board
        if board.is_won():
            completed = [t for t in board.tubes if t.is_complete]
            colors = {t.balls[0].color for t in completed}
            return StateCheck(
                is_game_over=True,
                is_won=True,
                end_reason=EndReason.VICTORY,
                message=(
                    f"Sorted {len(colors)} colors into {len(completed)} tubes!"
                ),
                details={
                    "completed_tubes": len(completed),
                    "completed_colors": len(colors),
                    "total_balls": sum(t.count for t in board.tubes),
                    "moves": self.state.moves_count,
                },
            )

        if not board.has_legal_move():
            empty = board.empty_tube_count()
            message = (
                f"No legal moves left, with {empty} empty tubes unused."
                if empty
                else "No legal moves left. Try a different strategy."
            )
            return StateCheck(
                is_game_over=True,
                is_won=False,
                end_reason=EndReason.NO_MOVES_LEFT,
                message=message,
                details={
                    "empty_tubes": empty,
                    "moves_at_defeat": self.state.moves_count,
                },
            )

        return StateCheck(
            is_game_over=False,
            is_won=False,
            end_reason=EndReason.NONE,
            details={"legal_moves": len(board.legal_moves())},
        )

    def progress(self) -> Progress:
        completed = mixed = empty = 0
        colors: set[Color] = set()
        for tube in self.board.tubes:
            if tube.is_empty:
                empty += 1
                continue
            colors.update(tube.colors())
            if tube.is_complete:
                completed += 1
            elif not tube.is_monochrome:
                mixed += 1
        return Progress(
            completed_tubes=completed,
            mixed_tubes=mixed,
            empty_tubes=empty,
            total_colors=len(colors),
            legal_moves=len(self.board.legal_moves()),
            moves_used=self.state.moves_count,
            hints_used=self.state.hints_used,
            percentage=completed * 100 // max(1, len(colors)),
            status=self.state.status,
        )

    def is_dead_end_move(self, from_tube_id: int, to_tube_id: int) -> bool:
        """True if the move is illegal or would leave an unwon board with no moves."""
        if not self.can_move(from_tube_id, to_tube_id):
            return True
        simulated = self.board.copy()
        simulated.transfer(from_tube_id, to_tube_id)
        return is_stuck(simulated)

    # -- helpers --------------------------------------------------------------

    def _relocate(self, from_tube_id: int, to_tube_id: int, color: Color) -> bool:
        src = self.board.tube(from_tube_id)
        dst = self.board.tube(to_tube_id)
        if src is None or dst is None or dst.is_full:
            return False
        if src.top_color() != color:
            return False
        self.board.transfer(from_tube_id, to_tube_id)
        return True

    def _refresh_status(self) -> None:
        check = self.check_state()
        if not check.is_game_over:
            return
        status = GameStatus.COMPLETED if check.is_won else GameStatus.FAILED
        self.state.finish(status)
        logger.info(
            "Game %s finished (%s) after %d moves",
            self.state.game_id, status.value, self.state.moves_count,
        )

    def _invalidate(self) -> None:
        self.cache.invalidate(self.state.game_id)
