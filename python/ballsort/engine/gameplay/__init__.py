from ballsort.engine.gameplay.game import (
    EndReason,
    GamePlay,
    IllegalMove,
    Progress,
    StateCheck,
    can_move,
    illegal_reason,
    is_stuck,
    is_won,
)

__all__ = [
    "EndReason",
    "GamePlay",
    "IllegalMove",
    "Progress",
    "StateCheck",
    "can_move",
    "illegal_reason",
    "is_stuck",
    "is_won",
]
