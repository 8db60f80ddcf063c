from ballsort.engine.gamepolicy.difficulty import DifficultyPolicy

__all__ = ["DifficultyPolicy"]
