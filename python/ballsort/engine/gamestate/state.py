"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import StrEnum

from ballsort.models.board import Board
from ballsort.models.codec import serialize
from ballsort.models.move import Move


class GameStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of a game, suitable for caching."""

    game_id: str
    board: str
    status: GameStatus
    moves_count: int
    hints_used: int


class GameState:
    """Holds the board, the move log, status, hint usage and elapsed time."""

    def __init__(self, board: Board, game_id: str | None = None) -> None:
        self.board = board
        self.game_id: str = game_id or uuid.uuid4().hex
        self.moves: list[Move] = []
        self.status: GameStatus = GameStatus.IN_PROGRESS
        self.hints_used: int = 0
        self.end_time: float | None = None
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    # -- status ---------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS

    def finish(self, status: GameStatus) -> None:
        self.status = status
        self.end_time = time.time()
        self.pause()

    def reopen(self) -> None:
        self.status = GameStatus.IN_PROGRESS
        self.end_time = None
        self.resume()

    # -- move log -------------------------------------------------------------

    @property
    def moves_count(self) -> int:
        return sum(1 for m in self.moves if not m.is_undone)

    @property
    def can_undo(self) -> bool:
        return any(not m.is_undone for m in self.moves)

    @property
    def can_redo(self) -> bool:
        return any(m.is_undone for m in self.moves)

    def next_move_number(self) -> int:
        return len(self.moves) + 1

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            game_id=self.game_id,
            board=serialize(self.board),
            status=self.status,
            moves_count=self.moves_count,
            hints_used=self.hints_used,
        )
