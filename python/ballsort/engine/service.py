"""Entry points the surrounding application calls into.

Persistence, HTTP and authentication live outside; they pass plain data in
and store whatever comes back. Nothing here raises on bad input: corrupt
boards come back as ``None`` / ``False`` and rejected moves as values.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from ballsort.config import DEFAULT_CONFIG, EngineConfig
from ballsort.engine.gamecache import BoardCache, TTLBoardCache
from ballsort.engine.gamegenerator import GameGenerator
from ballsort.engine.gameplay import GamePlay, IllegalMove, is_stuck, is_won
from ballsort.engine.gamesolver import HintResult, HintType
from ballsort.engine.gamestate import GameSnapshot, GameState
from ballsort.models.board import Board
from ballsort.models.codec import FormatError, deserialize, parse_board
from ballsort.models.level import GeneratedLevel
from ballsort.models.move import Move

logger = logging.getLogger(__name__)


class BallSortEngine:
    """Facade over generation, play and hints with injected RNG and cache."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        cache: BoardCache | None = None,
        rng_factory: Callable[[], random.Random] | None = None,
    ) -> None:
        self.config = config
        self.cache: BoardCache = (
            cache if cache is not None else TTLBoardCache(config.cache_ttl_seconds)
        )
        self._rng_factory = rng_factory

    # -- levels ---------------------------------------------------------------

    def generate_level(self, level_number: int, seed: int | None = None) -> GeneratedLevel:
        rng = self._rng_factory() if self._rng_factory and seed is None else None
        return GameGenerator.generate_level(level_number, seed, rng, self.config)

    def validate_level(self, compact_state: str) -> bool:
        return GameGenerator.validate(compact_state)

    def load_board(self, text: str, capacity: int | None = None) -> Board | None:
        """Parse a compact or legacy board; a corrupt board yields ``None``."""
        try:
            return parse_board(text, capacity)
        except FormatError as exc:
            logger.warning("Rejected stored board: %s", exc)
            return None

    # -- games ----------------------------------------------------------------

    def start_game(self, level: GeneratedLevel, game_id: str | None = None) -> GamePlay:
        board = deserialize(
            level.compact_initial_state, capacity=level.parameters.capacity
        )
        return GamePlay(GameState(board, game_id), config=self.config, cache=self.cache)

    def resume_game(self, text: str, game_id: str | None = None) -> GamePlay | None:
        """Open a game from a stored board; ``None`` if the board is corrupt."""
        board = self.load_board(text)
        if board is None:
            return None
        return GamePlay(GameState(board, game_id), config=self.config, cache=self.cache)

    def snapshot(self, game: GamePlay) -> GameSnapshot:
        """Cached view of *game*, rebuilt after any move, undo, redo or hint."""
        cached = self.cache.get(game.state.game_id)
        if cached is not None:
            return cached
        snapshot = game.state.snapshot()
        self.cache.put(snapshot)
        return snapshot

    @staticmethod
    def execute_move(game: GamePlay, from_tube_id: int, to_tube_id: int) -> Move | IllegalMove:
        return game.execute_move(from_tube_id, to_tube_id)

    @staticmethod
    def undo(game: GamePlay) -> bool:
        return game.undo()

    @staticmethod
    def undo_many(game: GamePlay, count: int) -> int:
        return game.undo_many(count)

    @staticmethod
    def redo(game: GamePlay, count: int = 1) -> int:
        return game.redo(count)

    @staticmethod
    def get_hint(game: GamePlay, kind: HintType = HintType.SIMPLE) -> HintResult | None:
        return game.hint(kind)

    @staticmethod
    def is_won(board: Board) -> bool:
        return is_won(board)

    @staticmethod
    def is_stuck(board: Board) -> bool:
        return is_stuck(board)
