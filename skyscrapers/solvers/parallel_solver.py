"""Parallel search: split the backtracking tree at a fixed depth and run the subtrees concurrently."""

from __future__ import annotations
import multiprocessing
import threading
from concurrent.futures import (
    FIRST_COMPLETED,
    BrokenExecutor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from contextlib import ExitStack
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from .base_solver import SearchMode, SolverStats
from .sequential_solver import SequentialSolver
from ..config import SolverConfig
from ..core.board import SkyscrapersBoard
from ..core.hints import HintSet
from ..logging_utils import get_logger

logger = get_logger("solvers.parallel")


class _LocalCounter:
    def __init__(self):
        self.value = 0


class StopSignal:
    """
    Shared solution counter and stop flag for cooperative early stop.

    Units call record() for every board they accept and poll is_set()
    after each complete candidate. The flag is raised once the shared
    counter reaches `desired`.
    """

    def __init__(self, desired: int, counter, lock, event):
        self.desired = desired
        self._counter = counter
        self._lock = lock
        self._event = event

    @classmethod
    def for_threads(cls, desired: int) -> StopSignal:
        return cls(desired, _LocalCounter(), threading.Lock(), threading.Event())

    @classmethod
    def for_processes(cls, desired: int, manager) -> StopSignal:
        """Signal backed by proxies of a multiprocessing.Manager."""
        return cls(desired, manager.Value("i", 0), manager.Lock(), manager.Event())

    def record(self, _board: Optional[SkyscrapersBoard] = None) -> None:
        with self._lock:
            self._counter.value += 1
            if self._counter.value >= self.desired:
                self._event.set()

    @property
    def found(self) -> int:
        return self._counter.value

    def set(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()


class ResultCollector:
    """Lock-guarded list of boards merged from all units."""

    def __init__(self):
        self._lock = threading.Lock()
        self._boards: List[SkyscrapersBoard] = []

    def extend(self, boards: Sequence[SkyscrapersBoard]) -> None:
        with self._lock:
            self._boards.extend(boards)

    def snapshot(self) -> List[SkyscrapersBoard]:
        with self._lock:
            return list(self._boards)

    def __len__(self) -> int:
        with self._lock:
            return len(self._boards)


def _run_unit(
    size: int,
    hints: HintSet,
    incremental_hints: bool,
    prefix: List[int],
    stop_level: int,
    max_solutions: Optional[int],
    signal: Optional[StopSignal]
) -> Tuple[List[SkyscrapersBoard], SolverStats]:
    """
    Search one subtree. Runs in a worker, so it must stay module-level.

    The unit builds its own solver and owns its copy of the prefix.
    """
    solver = SequentialSolver(size, hints, incremental_hints)

    if signal is not None and signal.is_set():
        return [], solver.stats

    boards = solver.search_from(
        prefix,
        stop_level,
        max_solutions=max_solutions,
        should_stop=signal.is_set if signal is not None else None,
        on_solution=signal.record if signal is not None else None,
    )
    return boards, solver.stats


class ParallelSolver(SequentialSolver):
    """
    Backtracking search split into independent units.

    Every valid assignment of the first `stop_level` cells becomes one unit;
    units continue the sequential search over the remaining cells in a
    process or thread pool, and their results are merged.

    A shallow stop level yields few, large units; a deep one yields many
    small units. The default (one full row) is a reasonable middle ground
    for boards up to about 7x7.
    """

    name = "Parallel Backtracking"

    def __init__(
        self,
        size: int,
        hints: Optional[HintSet] = None,
        config: Optional[SolverConfig] = None,
        incremental_hints: Optional[bool] = None
    ):
        """
        Args:
            size: Board size N.
            hints: Target hints. Defaults to fully unconstrained.
            config: Stop level, worker count and executor kind.
            incremental_hints: Overrides config.incremental_hints.
        """
        self.config = config or SolverConfig()
        if incremental_hints is None:
            incremental_hints = self.config.incremental_hints
        super().__init__(size, hints, incremental_hints)

    def _solve(self, mode: SearchMode) -> List[SkyscrapersBoard]:
        if mode.is_exhaustive:
            return self.generate_boards()
        return self.generate_n_boards(mode.limit)

    def generate_boards(self, stop_level: Optional[int] = None) -> List[SkyscrapersBoard]:
        """
        Exhaustive parallel search.

        Args:
            stop_level: Cell index at which to split. Defaults to the config.

        Returns:
            Every matching board, in no particular order.
        """
        return self._run_units(self._resolve_stop_level(stop_level), desired=None)

    def generate_n_boards(
        self,
        desired_boards: int,
        stop_level: Optional[int] = None
    ) -> List[SkyscrapersBoard]:
        """
        Parallel search that stops once enough boards are found.

        Which boards are returned depends on scheduling, but every one of
        them matches the hints and none repeats.

        Returns:
            Exactly min(desired_boards, total matching boards) boards.
        """
        if desired_boards < 1:
            raise ValueError(f"desired_boards must be at least 1, got {desired_boards}")
        return self._run_units(self._resolve_stop_level(stop_level), desired=desired_boards)

    def _resolve_stop_level(self, stop_level: Optional[int]) -> int:
        if stop_level is None:
            return self.config.resolve_stop_level(self.size)
        return max(0, min(stop_level, self.size * self.size))

    def _run_units(self, stop_level: int, desired: Optional[int]) -> List[SkyscrapersBoard]:
        prefixes = self.enumerate_prefixes(stop_level)
        self.stats.units = len(prefixes)
        collector = ResultCollector()

        logger.debug(
            "Split %dx%d search at cell %d into %d units",
            self.size, self.size, stop_level, len(prefixes)
        )

        if self.config.workers == 1 or len(prefixes) <= 1:
            self._run_inline(prefixes, stop_level, desired, collector)
        else:
            self._run_pool(prefixes, stop_level, desired, collector)

        if self.stats.failed_units:
            logger.warning(
                "%d of %d units failed; results are incomplete",
                self.stats.failed_units, len(prefixes)
            )

        boards = collector.snapshot()
        if desired is not None:
            boards = boards[:desired]
        return boards

    def _run_inline(
        self,
        prefixes: List[List[int]],
        stop_level: int,
        desired: Optional[int],
        collector: ResultCollector
    ) -> None:
        for index, prefix in enumerate(prefixes):
            remaining = None if desired is None else desired - len(collector)
            try:
                boards, unit_stats = _run_unit(
                    self.size, self.hints, self.incremental_hints,
                    prefix, stop_level, remaining, None
                )
            except Exception as e:
                self._unit_failed(index, e)
                continue

            collector.extend(boards)
            self.stats.merge(unit_stats)
            if desired is not None and len(collector) >= desired:
                break

    def _run_pool(
        self,
        prefixes: List[List[int]],
        stop_level: int,
        desired: Optional[int],
        collector: ResultCollector
    ) -> None:
        use_processes = self.config.executor == "process"
        executor_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
        workers = min(self.config.workers, len(prefixes))

        with ExitStack() as stack:
            signal = None
            if desired is not None:
                if use_processes:
                    manager = stack.enter_context(multiprocessing.Manager())
                    signal = StopSignal.for_processes(desired, manager)
                else:
                    signal = StopSignal.for_threads(desired)

            executor = stack.enter_context(executor_cls(max_workers=workers))
            futures = {
                executor.submit(
                    _run_unit,
                    self.size,
                    self.hints,
                    self.incremental_hints,
                    prefix,
                    stop_level,
                    desired,
                    signal,
                ): index
                for index, prefix in enumerate(prefixes)
            }

            pbar = tqdm(total=len(futures), desc="Units", disable=not self.config.show_progress)
            pending = set(futures)

            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)

                for future in done:
                    self._collect(future, futures[future], collector)
                    pbar.update(1)

                if desired is not None and len(collector) >= desired:
                    signal.set()
                    for future in pending:
                        future.cancel()
                    logger.debug(
                        "Collected %d boards, stopping %d remaining units",
                        len(collector), len(pending)
                    )
                    break

            pbar.close()

    def _collect(self, future: Future, index: int, collector: ResultCollector) -> None:
        try:
            boards, unit_stats = future.result()
        except BrokenExecutor:
            raise
        except Exception as e:
            self._unit_failed(index, e)
            return

        collector.extend(boards)
        self.stats.merge(unit_stats)

    def _unit_failed(self, index: int, error: Exception) -> None:
        self.stats.failed_units += 1
        logger.warning("Unit %d failed: %s", index, error)
