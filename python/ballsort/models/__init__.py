from ballsort.models.board import Ball, Board, Color, Tube
from ballsort.models.codec import (
    FormatError,
    deserialize,
    deserialize_legacy,
    parse_board,
    serialize,
)
from ballsort.models.level import DifficultyTier, GeneratedLevel, LevelParameters
from ballsort.models.move import Move

__all__ = [
    "Ball",
    "Board",
    "Color",
    "DifficultyTier",
    "FormatError",
    "GeneratedLevel",
    "LevelParameters",
    "Move",
    "Tube",
    "deserialize",
    "deserialize_legacy",
    "parse_board",
    "serialize",
]
