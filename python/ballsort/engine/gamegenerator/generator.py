"""Generates solvable ball-sort levels."""

from __future__ import annotations

import logging
import random
import secrets

from ballsort.config import DEFAULT_CONFIG, EngineConfig
from ballsort.engine.gamepolicy import DifficultyPolicy
from ballsort.models.board import Board
from ballsort.models.codec import FormatError, deserialize, serialize
from ballsort.models.level import DifficultyTier, GeneratedLevel, LevelParameters

logger = logging.getLogger(__name__)


class GameGenerator:
    """Creates solvable puzzles by scrambling from the solved state.

    Every scramble move is legal under the game's own rule, and its inverse
    is legal right after it, so replaying the inverse moves in reverse order
    solves the board.
    """

    @staticmethod
    def solved(params: LevelParameters) -> Board:
        """One full tube per color, followed by the empty tubes."""
        tubes = [[color] * params.balls_per_color for color in range(params.color_count)]
        tubes += [[] for _ in range(params.tube_count - params.color_count)]
        return Board.from_lists(params.capacity, tubes)

    @staticmethod
    def scramble(
        board: Board, target_moves: int, rng: random.Random, retry_factor: int = 5
    ) -> list[tuple[int, int]]:
        """Scramble *board* in-place using random legal moves.

        Moves are drawn uniformly from the legal moves minus the inverse of
        the previous move, unless that inverse is the only legal move.

        Keeps going past *target_moves* while the board is still won, within
        a budget of ``retry_factor * target_moves`` attempts. Stops early when
        no legal move remains. Returns the applied ``(from, to)`` moves.
        """
        history: list[tuple[int, int]] = []
        max_attempts = retry_factor * max(target_moves, 1)
        attempts = 0

        while attempts < max_attempts and (
            len(history) < target_moves or board.is_won()
        ):
            attempts += 1
            moves = board.legal_moves()
            if not moves:
                break
            if history:
                back = (history[-1][1], history[-1][0])
                if back in moves and len(moves) > 1:
                    moves.remove(back)
            move = rng.choice(moves)
            board.transfer(*move)
            history.append(move)

        return history

    @staticmethod
    def generate(
        params: LevelParameters,
        level_number: int = 0,
        seed: int | None = None,
        rng: random.Random | None = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> GeneratedLevel:
        """Return a solvable level for *params*.

        The recorded seed reproduces the level. It is taken from *seed*,
        drawn from *rng* when one is injected, or drawn fresh.
        """
        if seed is None:
            seed = rng.getrandbits(63) if rng is not None else secrets.randbits(63)
        scramble_rng = random.Random(seed)

        board = GameGenerator.solved(params)
        history = GameGenerator.scramble(
            board, params.shuffle_move_count, scramble_rng, config.generation_retry_factor
        )
        exhausted = not history or board.is_won()
        if exhausted:
            logger.warning(
                "Level %d: scramble exhausted after %d moves (seed %d)",
                level_number, len(history), seed,
            )

        level = GeneratedLevel(
            level_number=level_number,
            parameters=params,
            compact_initial_state=serialize(board),
            generation_seed=seed,
            minimum_move_estimate=GameGenerator.estimate_minimum_moves(
                params, len(history)
            ),
            scramble_moves=tuple(history),
            exhausted=exhausted,
        )
        logger.info(
            "Level %d: %d colors, %d tubes (%d empty), %d balls/color, "
            "%d/%d scramble moves",
            level_number, params.color_count, params.tube_count,
            params.empty_tube_count, params.balls_per_color,
            len(history), params.shuffle_move_count,
        )
        return level

    @staticmethod
    def generate_level(
        level_number: int,
        seed: int | None = None,
        rng: random.Random | None = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> GeneratedLevel:
        params = DifficultyPolicy.parameters(level_number)
        return GameGenerator.generate(params, level_number, seed, rng, config)

    @staticmethod
    def validate(compact_state: str, balls_per_color: int | None = None) -> bool:
        """Cheap sanity check: every color has the same ball count.

        Optionally that count must equal *balls_per_color*. This does not
        prove solvability; that comes from how levels are generated.
        """
        try:
            board = deserialize(compact_state)
        except FormatError:
            return False
        counts = set(board.color_counts().values())
        if not counts:
            return True
        if len(counts) != 1:
            return False
        return balls_per_color is None or counts == {balls_per_color}

    @staticmethod
    def estimate_minimum_moves(params: LevelParameters, scramble_moves: int) -> int:
        """Rough move estimate for scoring and display, not an exact solve."""
        base = params.color_count * params.balls_per_color
        if params.difficulty_tier is DifficultyTier.EASY:
            estimate = base // 2
        elif params.difficulty_tier is DifficultyTier.MEDIUM:
            estimate = base * 2 // 3
        else:
            estimate = base
        # The reversed scramble is itself a solution.
        return max(1, min(estimate, scramble_moves))
