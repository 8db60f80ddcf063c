"""Hint and solver engine for ball-sort boards.

All analysis runs on copies; the board passed in is never mutated.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NamedTuple

from ballsort.config import DEFAULT_CONFIG, EngineConfig
from ballsort.models.board import Board
from ballsort.models.palette import hex_for

logger = logging.getLogger(__name__)


class HintType(StrEnum):
    SIMPLE = "simple"
    ADVANCED = "advanced"
    STRATEGIC = "strategic"
    TUTORIAL = "tutorial"


class HintStep(NamedTuple):
    from_tube_id: int
    to_tube_id: int


class ScoredMove(NamedTuple):
    step: HintStep
    score: int


@dataclass
class HintResult:
    kind: HintType
    moves: list[HintStep] = field(default_factory=list)
    score: int = 0
    explanation: str | None = None


# -- move scoring weights -----------------------------------------------------

COMPLETES_TUBE = 100
JOINS_STACK = 80
JOINS_STACK_PER_BALL = 10
UNBURIES_SAME_COLOR = 60
LEAVES_MIXED_TUBE = 40
LEAVES_MIXED_PER_COLOR = 5
INTO_EMPTY_TUBE = 30
SPENDS_LAST_EMPTY = -10
BREAKS_CLEAN_STACK = -20
ONTO_MIXED_TUBE = -15


class Solver:
    """Stateless hint engine — all methods are static."""

    @staticmethod
    def hint(
        board: Board,
        kind: HintType = HintType.SIMPLE,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> HintResult | None:
        """Return a hint of the requested kind, or ``None`` if none was found."""
        if board.is_won():
            return None
        return _HINTS[kind](board, config)

    # -- scoring --------------------------------------------------------------

    @staticmethod
    def score_move(
        board: Board, from_tube_id: int, to_tube_id: int, empty_reserve: int = 2
    ) -> int:
        """Heuristic value of a legal move, floored at 0."""
        src = board.tube(from_tube_id)
        dst = board.tube(to_tube_id)
        if src is None or dst is None or src.is_empty:
            raise ValueError(f"No ball to move from tube {from_tube_id}.")
        color = src.balls[-1].color
        dst_matches = not dst.is_empty and all(b.color == color for b in dst.balls)

        score = 0
        if dst.count + 1 == dst.capacity and (dst.is_empty or dst_matches):
            score += COMPLETES_TUBE
        if dst_matches:
            score += JOINS_STACK + dst.count * JOINS_STACK_PER_BALL
        if any(b.color == color for b in src.balls[:-1]):
            score += UNBURIES_SAME_COLOR
        src_colors = src.distinct_colors()
        if src_colors > 1:
            score += LEAVES_MIXED_TUBE + src_colors * LEAVES_MIXED_PER_COLOR
        if dst.is_empty:
            score += INTO_EMPTY_TUBE
            if board.empty_tube_count() - 1 < empty_reserve:
                score += SPENDS_LAST_EMPTY
        if src.count > 1 and src.is_monochrome:
            score += BREAKS_CLEAN_STACK
        if not dst.is_empty and not dst_matches:
            score += ONTO_MIXED_TUBE
        return max(0, score)

    @staticmethod
    def evaluate_moves(board: Board, empty_reserve: int = 2) -> list[ScoredMove]:
        """Score every legal move, in the board's stable enumeration order."""
        return [
            ScoredMove(HintStep(f, t), Solver.score_move(board, f, t, empty_reserve))
            for f, t in board.legal_moves()
        ]

    @staticmethod
    def best_move(board: Board, empty_reserve: int = 2) -> ScoredMove | None:
        """Highest-scoring legal move; ties go to the first one enumerated."""
        scored = Solver.evaluate_moves(board, empty_reserve)
        if not scored:
            return None
        return max(scored, key=lambda m: m.score)

    # -- search ---------------------------------------------------------------

    @staticmethod
    def solve(
        board: Board, config: EngineConfig = DEFAULT_CONFIG
    ) -> list[HintStep] | None:
        """Bounded breadth-first search for a winning move sequence.

        Only the ``strategic_branching`` best-scored moves are expanded per
        state, paths are at most ``strategic_max_depth`` long and at most
        ``strategic_max_states`` distinct states are visited. Returns ``[]``
        for a board that is already won, ``None`` when the budget runs out.
        """
        start = board.copy()
        queue: deque[tuple[Board, list[HintStep]]] = deque([(start, [])])
        visited = {start.signature()}

        while queue:
            state, path = queue.popleft()
            if state.is_won():
                logger.debug(
                    "Solution of %d moves found after %d states", len(path), len(visited)
                )
                return path
            if len(path) >= config.strategic_max_depth:
                continue

            ranked = sorted(
                Solver.evaluate_moves(state, config.empty_tube_reserve),
                key=lambda m: -m.score,
            )
            for candidate in ranked[: config.strategic_branching]:
                nxt = state.copy()
                nxt.transfer(*candidate.step)
                signature = nxt.signature()
                if signature in visited:
                    continue
                if len(visited) >= config.strategic_max_states:
                    logger.debug("Search budget of %d states exhausted", len(visited))
                    return None
                visited.add(signature)
                queue.append((nxt, path + [candidate.step]))

        logger.debug("No solution within depth %d", config.strategic_max_depth)
        return None

    @staticmethod
    def is_solvable(board: Board, config: EngineConfig = DEFAULT_CONFIG) -> bool:
        """True if the bounded search finds a solution (False can be a miss)."""
        return Solver.solve(board, config) is not None

    # -- explanations ---------------------------------------------------------

    @staticmethod
    def explain(board: Board, from_tube_id: int, to_tube_id: int) -> str:
        src = board.tube(from_tube_id)
        dst = board.tube(to_tube_id)
        if src is None or dst is None or src.is_empty:
            raise ValueError(f"No ball to move from tube {from_tube_id}.")
        color = src.balls[-1].color

        if dst.is_empty:
            return "Moving into an empty tube makes room to sort the colors."
        if all(b.color == color for b in dst.balls):
            return (
                f"Grouping balls of the same color ({hex_for(color)}) "
                "brings you closer to winning."
            )
        if _frees_needed_ball(board, from_tube_id):
            return "This move frees important balls buried underneath."
        return "A strategic move to rearrange the pieces."


# -- hint strategies ----------------------------------------------------------


def _simple(board: Board, config: EngineConfig) -> HintResult | None:
    best = Solver.best_move(board, config.empty_tube_reserve)
    if best is None:
        return None
    return HintResult(kind=HintType.SIMPLE, moves=[best.step], score=best.score)


def _advanced(board: Board, config: EngineConfig) -> HintResult | None:
    first = Solver.best_move(board, config.empty_tube_reserve)
    if first is None:
        return None
    moves = [first.step]
    simulated = board.copy()
    simulated.transfer(*first.step)
    if not simulated.is_won():
        second = Solver.best_move(simulated, config.empty_tube_reserve)
        if second is not None:
            moves.append(second.step)
    return HintResult(kind=HintType.ADVANCED, moves=moves, score=first.score)


def _strategic(board: Board, config: EngineConfig) -> HintResult | None:
    solution = Solver.solve(board, config)
    if not solution:
        return None
    return HintResult(
        kind=HintType.STRATEGIC,
        moves=solution,
        score=100,
        explanation=f"Sequence of {len(solution)} moves that completes the level.",
    )


def _tutorial(board: Board, config: EngineConfig) -> HintResult | None:
    best = Solver.best_move(board, config.empty_tube_reserve)
    if best is None:
        return None
    return HintResult(
        kind=HintType.TUTORIAL,
        moves=[best.step],
        score=best.score,
        explanation=Solver.explain(board, *best.step),
    )


_HINTS = {
    HintType.SIMPLE: _simple,
    HintType.ADVANCED: _advanced,
    HintType.STRATEGIC: _strategic,
    HintType.TUTORIAL: _tutorial,
}


def _frees_needed_ball(board: Board, from_tube_id: int) -> bool:
    """A ball under the top of *from* is wanted by an open same-color stack."""
    src = board.tube(from_tube_id)
    if src is None:
        return False
    for ball in src.balls[:-1]:
        for tube in board.tubes:
            if (
                tube.id != from_tube_id
                and tube.is_monochrome
                and tube.balls[0].color == ball.color
                and not tube.is_full
            ):
                return True
    return False
