"""Skyscrapers puzzle generator and parallel backtracking solver."""

from .core import SkyscrapersBoard, Edge, HintSet, count_visibility
from .solvers import SequentialSolver, ParallelSolver, SearchMode, solve
from .config import SolverConfig

__version__ = "1.0.0"

__all__ = [
    "SkyscrapersBoard",
    "Edge",
    "HintSet",
    "count_visibility",
    "SequentialSolver",
    "ParallelSolver",
    "SearchMode",
    "SolverConfig",
    "solve",
]
