"""Level value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class DifficultyTier(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(frozen=True)
class LevelParameters:
    color_count: int
    tube_count: int
    balls_per_color: int
    empty_tube_count: int
    shuffle_move_count: int
    difficulty_tier: DifficultyTier

    @property
    def capacity(self) -> int:
        # A tube holds exactly one color's worth of balls.
        return self.balls_per_color

    def satisfies_floor(self) -> bool:
        return (
            self.empty_tube_count >= 1
            and self.tube_count >= self.color_count + self.empty_tube_count
        )


@dataclass(frozen=True)
class GeneratedLevel:
    """A generated level. Regeneration yields a new object, never an edit."""

    level_number: int
    parameters: LevelParameters
    compact_initial_state: str
    generation_seed: int
    minimum_move_estimate: int
    scramble_moves: tuple[tuple[int, int], ...] = ()
    exhausted: bool = False

    @property
    def scramble_moves_applied(self) -> int:
        return len(self.scramble_moves)
