from ballsort.engine.gamesolver.solver import (
    HintResult,
    HintStep,
    HintType,
    ScoredMove,
    Solver,
)

__all__ = ["HintResult", "HintStep", "HintType", "ScoredMove", "Solver"]
