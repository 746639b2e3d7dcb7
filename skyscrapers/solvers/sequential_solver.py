"""Depth-first backtracking search over all boards matching a hint set."""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from .base_solver import BaseSolver, SearchMode
from ..config import DEFAULT_INCREMENTAL_HINTS
from ..core.board import SkyscrapersBoard
from ..core.hints import HintSet
from ..core.visibility import count_visibility


class _SearchState:
    """
    Partial grid owned by one search.

    Cells are a flat row-major list. For every row and column the state keeps
    a bitmask of used values plus the running maximum and visible count of
    the assigned prefix (row read from the left, column from the top).
    """

    def __init__(self, size: int):
        self.size = size
        self.cells = [0] * (size * size)
        self.row_used = [0] * size
        self.col_used = [0] * size
        self.row_max = [0] * size
        self.row_seen = [0] * size
        self.col_max = [0] * size
        self.col_seen = [0] * size

    def place(self, row: int, col: int, value: int) -> tuple:
        """Assign a cell and return what undo() needs to restore it."""
        saved = (self.row_max[row], self.row_seen[row], self.col_max[col], self.col_seen[col])
        bit = 1 << value

        self.cells[row * self.size + col] = value
        self.row_used[row] |= bit
        self.col_used[col] |= bit

        if value > self.row_max[row]:
            self.row_max[row] = value
            self.row_seen[row] += 1
        if value > self.col_max[col]:
            self.col_max[col] = value
            self.col_seen[col] += 1

        return saved

    def undo(self, row: int, col: int, value: int, saved: tuple) -> None:
        bit = 1 << value
        self.cells[row * self.size + col] = 0
        self.row_used[row] &= ~bit
        self.col_used[col] &= ~bit
        self.row_max[row], self.row_seen[row], self.col_max[col], self.col_seen[col] = saved


def _prefix_can_match(seen: int, peak: int, remaining: int, hint: int, size: int) -> bool:
    """
    Whether a line prefix can still end with exactly `hint` visible buildings.

    Buildings visible in the prefix stay visible, so `seen` only grows.
    Once N is placed the count is final. Before that, N itself is still to
    come, and at most min(N - peak, remaining) more buildings can appear.
    """
    if seen > hint:
        return False
    if peak == size:
        return seen == hint
    return seen + 1 <= hint <= seen + min(size - peak, remaining)


class _SearchRun:
    """Per-call bookkeeping for search_from()."""

    def __init__(
        self,
        max_solutions: Optional[int],
        should_stop: Optional[Callable[[], bool]],
        on_solution: Optional[Callable[[SkyscrapersBoard], None]]
    ):
        self.max_solutions = max_solutions
        self.should_stop = should_stop
        self.on_solution = on_solution
        self.results: List[SkyscrapersBoard] = []


class SequentialSolver(BaseSolver):
    """
    Exhaustive backtracking search for boards matching a target hint set.

    Cells are assigned in row-major order. Candidates for a cell exclude
    every value already used in its row or column, so only Latin-square
    prefixes are ever explored. Complete boards are accepted only if
    SkyscrapersBoard.check_validity_with_hints() holds for the target hints.

    With incremental_hints enabled, hints also prune partial boards:
    LEFT and TOP hints are checked on every prefix, RIGHT and BOTTOM hints
    as soon as their row or column is complete.
    """

    name = "Sequential Backtracking"

    def __init__(
        self,
        size: int,
        hints: Optional[HintSet] = None,
        incremental_hints: bool = DEFAULT_INCREMENTAL_HINTS
    ):
        super().__init__(size, hints)
        self.incremental_hints = incremental_hints

        # Plain lists are faster than tuple lookups through the dataclass
        self._top = list(self.hints.top)
        self._right = list(self.hints.right)
        self._bottom = list(self.hints.bottom)
        self._left = list(self.hints.left)

    def _solve(self, mode: SearchMode) -> List[SkyscrapersBoard]:
        return self.generate_boards(max_solutions=mode.limit)

    def generate_boards(self, max_solutions: Optional[int] = None) -> List[SkyscrapersBoard]:
        """
        Find boards matching the hints.

        Args:
            max_solutions: Stop as soon as this many boards are found.
                           None searches the whole tree.
        """
        return self.search_from([0] * (self.size * self.size), 0, max_solutions)

    def search_from(
        self,
        cells: Sequence[int],
        start_index: int,
        max_solutions: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None,
        on_solution: Optional[Callable[[SkyscrapersBoard], None]] = None
    ) -> List[SkyscrapersBoard]:
        """
        Continue the search from a partial assignment.

        Args:
            cells: Flat row-major grid. Cells before start_index are the
                   fixed prefix; later cells are ignored.
            start_index: First cell to assign (0..N*N).
            max_solutions: Stop once this many boards are found.
            should_stop: Polled after each complete candidate board; the
                         search returns as soon as it answers True.
            on_solution: Called with every accepted board.

        Returns:
            Accepted boards in search order. Empty if the prefix cannot be
            completed or already conflicts with the hints.

        Raises:
            ValueError: If the prefix repeats a value in a row or column,
                        or holds a value outside 1..N.
        """
        total = self.size * self.size
        if len(cells) != total:
            raise ValueError(f"Expected {total} cells, got {len(cells)}")
        if start_index < 0 or start_index > total:
            raise ValueError(f"start_index must be 0-{total}, got {start_index}")
        if max_solutions is not None and max_solutions < 1:
            raise ValueError(f"max_solutions must be at least 1, got {max_solutions}")

        state = _SearchState(self.size)
        if not self._load_prefix(state, cells, start_index):
            return []

        run = _SearchRun(max_solutions, should_stop, on_solution)
        self._descend(state, start_index, total, run)
        return run.results

    def enumerate_prefixes(self, stop_level: int) -> List[List[int]]:
        """
        All valid partial assignments of cells [0, stop_level).

        Uses the same pruning as the full search, so every prefix returned
        is a possible start for search_from(prefix, stop_level). stop_level
        is clamped to [0, N*N].

        Returns:
            Flat grids with zeros after stop_level.
        """
        stop_level = max(0, min(stop_level, self.size * self.size))
        state = _SearchState(self.size)
        prefixes: List[List[int]] = []
        self._descend(state, 0, stop_level, prefixes)
        return prefixes

    def _load_prefix(self, state: _SearchState, cells: Sequence[int], start_index: int) -> bool:
        n = self.size
        for index in range(start_index):
            row, col = divmod(index, n)
            value = int(cells[index])
            if value < 1 or value > n:
                raise ValueError(f"Prefix cell {index} must be 1-{n}, got {value}")
            if (state.row_used[row] | state.col_used[col]) & (1 << value):
                raise ValueError(f"Prefix repeats {value} at row {row}, column {col}")
            state.place(row, col, value)
            if not self._consistent(state, row, col):
                return False
        return True

    def _descend(self, state: _SearchState, index: int, stop_index: int, sink) -> bool:
        """
        Assign cells [index, stop_index) depth-first.

        `sink` is a _SearchRun for a full search, or a list collecting
        prefixes. Returns True when the whole search must stop.
        """
        if index == stop_index:
            if isinstance(sink, _SearchRun):
                return self._accept(state, sink)
            sink.append(list(state.cells))
            return False

        n = self.size
        row, col = divmod(index, n)
        used = state.row_used[row] | state.col_used[col]

        for value in range(1, n + 1):
            if used & (1 << value):
                continue

            self.stats.nodes_explored += 1
            saved = state.place(row, col, value)

            if self._consistent(state, row, col):
                if self._descend(state, index + 1, stop_index, sink):
                    state.undo(row, col, value, saved)
                    return True

            state.undo(row, col, value, saved)

        self.stats.backtracks += 1
        return False

    def _consistent(self, state: _SearchState, row: int, col: int) -> bool:
        """Hint checks after assigning (row, col); Latin checks happen earlier."""
        if not self.incremental_hints:
            return True

        n = self.size

        hint = self._left[row]
        if hint and not _prefix_can_match(
            state.row_seen[row], state.row_max[row], n - col - 1, hint, n
        ):
            return False

        hint = self._top[col]
        if hint and not _prefix_can_match(
            state.col_seen[col], state.col_max[col], n - row - 1, hint, n
        ):
            return False

        if col == n - 1:
            hint = self._right[row]
            if hint:
                line = state.cells[row * n:(row + 1) * n]
                if count_visibility(line[::-1]) != hint:
                    return False

        if row == n - 1:
            hint = self._bottom[col]
            if hint:
                line = state.cells[col::n]
                if count_visibility(line[::-1]) != hint:
                    return False

        return True

    def _accept(self, state: _SearchState, run: _SearchRun) -> bool:
        """Handle a complete candidate board. Returns True to stop searching."""
        board = SkyscrapersBoard(self.size, state.cells, hints=self.hints)

        if board.check_validity_with_hints():
            run.results.append(board)
            if run.on_solution is not None:
                run.on_solution(board)
            if run.max_solutions is not None and len(run.results) >= run.max_solutions:
                return True

        if run.should_stop is not None and run.should_stop():
            return True

        return False
