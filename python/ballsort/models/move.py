"""Move log entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ballsort.models.board import Color


@dataclass
class Move:
    """One entry of a game's append-only move log.

    Undo flips ``is_undone`` instead of deleting the entry, so a later redo
    can replay it.
    """

    from_tube_id: int
    to_tube_id: int
    ball_color: Color
    move_number: int
    is_undone: bool = False
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
