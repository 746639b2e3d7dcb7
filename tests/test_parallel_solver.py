"""Unit tests for the parallel search."""

import pytest
from skyscrapers.config import SolverConfig
from skyscrapers.core.board import SkyscrapersBoard
from skyscrapers.core.hints import HintSet
from skyscrapers.solvers import (
    ParallelSolver,
    ResultCollector,
    SearchMode,
    SequentialSolver,
    StopSignal,
    solve,
)
from skyscrapers.solvers import parallel_solver


REFERENCE_5X5 = [
    [2, 4, 1, 5, 3],
    [5, 1, 3, 2, 4],
    [4, 3, 5, 1, 2],
    [1, 2, 4, 3, 5],
    [3, 5, 2, 4, 1],
]

# LEFT hint on the first row only; leaves plenty of 4x4 solutions
LOOSE_HINTS = HintSet.from_string("0,0,0,0;0,0,0,0;0,0,0,0;2,0,0,0")


def grids(boards):
    return sorted(board.to_string() for board in boards)


def thread_config(**kwargs):
    return SolverConfig(workers=4, executor="thread", **kwargs)


class TestParallelSolverThreads:
    """Parallel search on a thread pool."""

    def test_matches_sequential(self):
        """Exhaustive parallel search finds exactly the sequential results."""
        expected = SequentialSolver(4, LOOSE_HINTS).generate_boards()
        solver = ParallelSolver(4, LOOSE_HINTS, config=thread_config())
        assert grids(solver.generate_boards()) == grids(expected)

    @pytest.mark.parametrize("stop_level", [0, 1, 3, 4, 7, 16, 40])
    def test_any_stop_level(self, stop_level):
        """Results do not depend on where the tree is split."""
        solver = ParallelSolver(3, config=thread_config())
        boards = solver.generate_boards(stop_level=stop_level)
        assert len(boards) == 12
        assert len(set(boards)) == 12

    def test_units_follow_stop_level(self):
        """Splitting after the first row gives one unit per permutation."""
        solver = ParallelSolver(4, config=thread_config(stop_level=4))
        _, stats = solver.solve()
        assert stats.units == 24
        assert stats.solutions == 576

    def test_derived_hints_contain_source(self):
        """Solving a board's hints in parallel finds that board."""
        source = SkyscrapersBoard.from_2d_list(REFERENCE_5X5)
        hints = source.compute_hints()
        boards = ParallelSolver(5, hints, config=thread_config()).generate_boards()
        assert source in boards
        assert all(board.check_validity_with_hints() for board in boards)

    @pytest.mark.parametrize("desired", [1, 5, 37])
    def test_generate_n_boards_exact(self, desired):
        """Early stop returns exactly the requested number of distinct valid boards."""
        solver = ParallelSolver(4, LOOSE_HINTS, config=thread_config())
        boards = solver.generate_n_boards(desired)
        assert len(boards) == desired
        assert len(set(boards)) == desired
        assert all(board.check_validity_with_hints() for board in boards)

    def test_generate_n_boards_more_than_total(self):
        """Asking for more boards than exist returns them all."""
        solver = ParallelSolver(3, config=thread_config())
        assert len(solver.generate_n_boards(50)) == 12

    def test_generate_n_boards_invalid(self):
        """At least one board must be requested."""
        solver = ParallelSolver(3, config=thread_config())
        with pytest.raises(ValueError):
            solver.generate_n_boards(0)

    def test_solve_modes(self):
        """solve() dispatches on the search mode."""
        solver = ParallelSolver(3, config=thread_config())
        boards, stats = solver.solve(SearchMode.cap(4))
        assert len(boards) == 4
        assert stats.solutions == 4

        boards, _ = solver.solve(SearchMode.exhaustive())
        assert len(boards) == 12

    def test_no_solution(self):
        """Contradictory hints give an empty result."""
        hints = HintSet.from_string("2,2;0,0;0,0;0,0")
        solver = ParallelSolver(2, hints, config=thread_config(stop_level=1))
        assert solver.generate_boards() == []
        assert solver.generate_n_boards(3) == []

    def test_failed_unit_contributes_nothing(self, monkeypatch):
        """A failing unit is counted and skipped; siblings still report."""
        original = parallel_solver._run_unit

        def flaky(size, hints, incremental_hints, prefix, stop_level, max_solutions, signal):
            if prefix[0] == 1:
                raise RuntimeError("simulated unit failure")
            return original(size, hints, incremental_hints, prefix, stop_level, max_solutions, signal)

        monkeypatch.setattr(parallel_solver, "_run_unit", flaky)

        solver = ParallelSolver(3, config=thread_config(stop_level=3))
        boards, stats = solver.solve()

        assert stats.units == 6
        assert stats.failed_units == 2
        assert len(boards) == 8
        assert all(board.get(0, 0) != 1 for board in boards)

    def test_failed_unit_inline(self, monkeypatch):
        """Single-worker runs isolate failures the same way."""
        def broken(*args):
            raise RuntimeError("simulated unit failure")

        monkeypatch.setattr(parallel_solver, "_run_unit", broken)

        solver = ParallelSolver(3, config=SolverConfig(workers=1, stop_level=3))
        boards, stats = solver.solve()
        assert boards == []
        assert stats.failed_units == 6

    def test_single_worker_inline(self):
        """workers=1 runs every unit in the calling thread."""
        solver = ParallelSolver(4, LOOSE_HINTS, config=SolverConfig(workers=1))
        expected = SequentialSolver(4, LOOSE_HINTS).generate_boards()
        assert grids(solver.generate_boards()) == grids(expected)
        assert len(solver.generate_n_boards(7)) == 7


class TestParallelSolverProcesses:
    """Parallel search on a process pool."""

    def test_matches_sequential(self):
        """Process units agree with the sequential search."""
        config = SolverConfig(workers=2, executor="process", stop_level=4)
        expected = SequentialSolver(4, LOOSE_HINTS).generate_boards()
        boards = ParallelSolver(4, LOOSE_HINTS, config=config).generate_boards()
        assert grids(boards) == grids(expected)

    def test_generate_n_boards(self):
        """Early stop works through the shared manager signal."""
        config = SolverConfig(workers=2, executor="process", stop_level=4)
        boards = ParallelSolver(4, config=config).generate_n_boards(10)
        assert len(boards) == 10
        assert len(set(boards)) == 10
        assert all(board.check_validity() for board in boards)

    def test_solve_function(self):
        """The module-level solve() can run in parallel."""
        config = SolverConfig(workers=2, executor="process")
        assert len(solve(3, parallel=True, config=config)) == 12


class TestSharedState:
    """Tests for the shared collector and stop signal."""

    def test_stop_signal_threshold(self):
        """The flag is raised once the counter reaches the target."""
        signal = StopSignal.for_threads(2)
        signal.record()
        assert not signal.is_set()
        signal.record()
        assert signal.is_set()
        assert signal.found == 2

    def test_collector(self):
        """Collected boards are returned as an independent list."""
        collector = ResultCollector()
        board = SkyscrapersBoard.from_2d_list([[1]])
        collector.extend([board])
        snapshot = collector.snapshot()
        snapshot.append(board)
        assert len(collector) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
