"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import time
import tracemalloc

from ..core.board import SkyscrapersBoard
from ..core.hints import HintSet


@dataclass
class SolverStats:
    """Statistics from a solver run."""
    # Core metrics
    solutions: int = 0
    time_seconds: float = 0.0
    memory_bytes: int = 0

    # Search metrics
    nodes_explored: int = 0
    backtracks: int = 0

    # Parallel metrics
    units: int = 0
    failed_units: int = 0

    # Additional metadata
    algorithm: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def merge(self, other: SolverStats) -> None:
        """Add the search counters of another run (e.g. a parallel unit)."""
        self.nodes_explored += other.nodes_explored
        self.backtracks += other.backtracks

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "nodes_explored": self.nodes_explored,
            "backtracks": self.backtracks,
            "units": self.units,
            "failed_units": self.failed_units,
            "algorithm": self.algorithm,
            **self.extra
        }


@dataclass(frozen=True)
class SearchMode:
    """Either exhaustive search (limit=None) or stop after `limit` boards."""
    limit: Optional[int] = None

    def __post_init__(self):
        if self.limit is not None and self.limit < 1:
            raise ValueError(f"Solution cap must be at least 1, got {self.limit}")

    @classmethod
    def exhaustive(cls) -> SearchMode:
        return cls(None)

    @classmethod
    def cap(cls, desired_boards: int) -> SearchMode:
        return cls(desired_boards)

    @property
    def is_exhaustive(self) -> bool:
        return self.limit is None


class BaseSolver(ABC):
    """Abstract base class for Skyscrapers searches over a fixed hint set."""

    name: str = "BaseSolver"

    def __init__(self, size: int, hints: Optional[HintSet] = None):
        """
        Args:
            size: Board size N.
            hints: Target hints. Defaults to fully unconstrained.

        Raises:
            ValueError: If size is not positive or the hints do not fit it.
        """
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        if hints is None:
            hints = HintSet.zeros(size)
        hints.validate(size)

        self.size = size
        self.hints = hints
        self.stats = SolverStats(algorithm=self.name)

    def solve(self, mode: Optional[SearchMode] = None) -> tuple[List[SkyscrapersBoard], SolverStats]:
        """
        Run the search with timing and memory tracking.

        Args:
            mode: Exhaustive (default) or capped search.

        Returns:
            Tuple of (boards matching the hints, stats). No match is an
            empty list, not an error.
        """
        if mode is None:
            mode = SearchMode.exhaustive()

        self.stats = SolverStats(algorithm=self.name)

        # Leave an outer trace (e.g. a benchmark) running
        owns_trace = not tracemalloc.is_tracing()
        if owns_trace:
            tracemalloc.start()

        start_time = time.perf_counter()
        try:
            boards = self._solve(mode)
        finally:
            self.stats.time_seconds = time.perf_counter() - start_time
            if owns_trace:
                _, peak = tracemalloc.get_traced_memory()
                tracemalloc.stop()
                self.stats.memory_bytes = peak

        self.stats.solutions = len(boards)
        return boards, self.stats

    @abstractmethod
    def _solve(self, mode: SearchMode) -> List[SkyscrapersBoard]:
        """
        Internal search method to be implemented by subclasses.

        Returns:
            Every matching board (exhaustive) or at most mode.limit of them.
        """
        pass

    def reset_stats(self) -> None:
        """Reset solver statistics."""
        self.stats = SolverStats(algorithm=self.name)
