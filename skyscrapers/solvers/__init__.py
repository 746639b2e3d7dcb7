"""Search engines for Skyscrapers puzzles."""

from typing import List, Optional

from .base_solver import BaseSolver, SolverStats, SearchMode
from .sequential_solver import SequentialSolver
from .parallel_solver import ParallelSolver, ResultCollector, StopSignal
from ..config import SolverConfig
from ..core.board import SkyscrapersBoard
from ..core.hints import HintSet


def solve(
    size: int,
    hints: Optional[HintSet] = None,
    mode: Optional[SearchMode] = None,
    parallel: bool = False,
    config: Optional[SolverConfig] = None
) -> List[SkyscrapersBoard]:
    """
    Find boards of the given size matching the hints.

    Args:
        size: Board size N.
        hints: Target hints; None means unconstrained.
        mode: SearchMode.exhaustive() (default) or SearchMode.cap(k).
        parallel: Split the search across workers.
        config: Parallel settings; also supplies incremental_hints.

    Returns:
        Matching boards. Empty when the puzzle has no solution.
    """
    if parallel:
        solver = ParallelSolver(size, hints, config=config)
    elif config is not None:
        solver = SequentialSolver(size, hints, incremental_hints=config.incremental_hints)
    else:
        solver = SequentialSolver(size, hints)

    boards, _ = solver.solve(mode)
    return boards


__all__ = [
    "BaseSolver",
    "SolverStats",
    "SearchMode",
    "SequentialSolver",
    "ParallelSolver",
    "ResultCollector",
    "StopSignal",
    "solve",
]
