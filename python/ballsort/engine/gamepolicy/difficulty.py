"""Maps a level number to generation parameters.

Pure and deterministic: the same level number always gives the same
parameters. Randomness belongs to the generator's scramble step only.
"""

from __future__ import annotations

from dataclasses import replace

from ballsort.models.level import DifficultyTier, LevelParameters

# level -> (colors, balls per color, empty tubes, scramble moves)
TUTORIAL_LEVELS: dict[int, tuple[int, int, int, int]] = {
    1: (2, 2, 2, 4),
    2: (2, 3, 2, 6),
    3: (3, 3, 2, 8),
    4: (3, 3, 2, 10),
    5: (3, 4, 2, 12),
    6: (4, 4, 2, 14),
    7: (4, 4, 2, 16),
    8: (4, 4, 2, 18),
    9: (5, 4, 2, 20),
    10: (5, 4, 2, 22),
}

_SHUFFLE_FACTOR: dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 1,
    DifficultyTier.MEDIUM: 2,
    DifficultyTier.HARD: 3,
    DifficultyTier.EXPERT: 4,
}

MAX_COLORS = 12


class DifficultyPolicy:
    """Stateless — all methods are static."""

    @staticmethod
    def tier(level_number: int) -> DifficultyTier:
        if level_number <= 10:
            return DifficultyTier.EASY
        if level_number <= 30:
            return DifficultyTier.MEDIUM
        if level_number <= 50:
            return DifficultyTier.HARD
        return DifficultyTier.EXPERT

    @staticmethod
    def parameters(level_number: int) -> LevelParameters:
        """Generation parameters for *level_number* (1-based)."""
        if level_number < 1:
            raise ValueError(f"Level numbers start at 1, got {level_number}.")

        tier = DifficultyPolicy.tier(level_number)
        if level_number in TUTORIAL_LEVELS:
            colors, per_color, empty, shuffle = TUTORIAL_LEVELS[level_number]
        else:
            colors, per_color, empty = DifficultyPolicy._step(level_number, tier)
            shuffle = colors * per_color * _SHUFFLE_FACTOR[tier]

        params = LevelParameters(
            color_count=colors,
            tube_count=colors + empty,
            balls_per_color=per_color,
            empty_tube_count=empty,
            shuffle_move_count=shuffle,
            difficulty_tier=tier,
        )
        return DifficultyPolicy.enforce_floor(params)

    @staticmethod
    def enforce_floor(params: LevelParameters) -> LevelParameters:
        """Raise empty and total tube counts until the board has room to play."""
        empty = max(params.empty_tube_count, 1)
        tubes = max(params.tube_count, params.color_count + empty)
        if (empty, tubes) == (params.empty_tube_count, params.tube_count):
            return params
        return replace(params, empty_tube_count=empty, tube_count=tubes)

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _step(level_number: int, tier: DifficultyTier) -> tuple[int, int, int]:
        """Colors, balls per color and empty tubes past the tutorial table."""
        if tier is DifficultyTier.MEDIUM:
            return 5 + (level_number - 11) // 5, 4, 2
        if tier is DifficultyTier.HARD:
            colors = min(8 + (level_number - 31) // 5, 10)
            return colors, 4 if level_number <= 40 else 5, 2
        colors = min(10 + (level_number - 51) // 10, MAX_COLORS)
        return colors, 5, 2
