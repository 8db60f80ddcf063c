from ballsort.engine.gamecache import BoardCache, NullBoardCache, TTLBoardCache
from ballsort.engine.gamegenerator import GameGenerator
from ballsort.engine.gameplay import GamePlay, IllegalMove
from ballsort.engine.gamepolicy import DifficultyPolicy
from ballsort.engine.gamesolver import HintResult, HintStep, HintType, Solver
from ballsort.engine.gamestate import GameSnapshot, GameState, GameStatus
from ballsort.engine.service import BallSortEngine

__all__ = [
    "BallSortEngine",
    "BoardCache",
    "DifficultyPolicy",
    "GameGenerator",
    "GamePlay",
    "GameSnapshot",
    "GameState",
    "GameStatus",
    "HintResult",
    "HintStep",
    "HintType",
    "IllegalMove",
    "NullBoardCache",
    "Solver",
    "TTLBoardCache",
]
