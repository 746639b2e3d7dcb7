"""Unit tests for the sequential backtracking search."""

import pytest
from skyscrapers.core.board import SkyscrapersBoard
from skyscrapers.core.hints import Edge, HintSet
from skyscrapers.solvers import SequentialSolver, SearchMode, solve


# Number of Latin squares of each order
LATIN_SQUARE_COUNTS = {1: 1, 2: 2, 3: 12, 4: 576}

CYCLIC_GRID = [
    [1, 2, 3, 4],
    [2, 3, 4, 1],
    [3, 4, 1, 2],
    [4, 1, 2, 3],
]

# A 5x5 board used to derive hint sets
REFERENCE_5X5 = [
    [2, 4, 1, 5, 3],
    [5, 1, 3, 2, 4],
    [4, 3, 5, 1, 2],
    [1, 2, 4, 3, 5],
    [3, 5, 2, 4, 1],
]


def grids(boards):
    return sorted(board.to_string() for board in boards)


class TestSequentialSolver:
    """Tests for SequentialSolver."""

    def test_single_cell(self):
        """The only 1x1 board is [[1]] with hint 1 on every edge."""
        hints = HintSet.from_lists([1], [1], [1], [1])
        boards = SequentialSolver(1, hints).generate_boards()
        assert len(boards) == 1
        assert boards[0].grid.tolist() == [[1]]

    @pytest.mark.parametrize("size", [1, 2, 3, 4])
    def test_unconstrained_counts_latin_squares(self, size):
        """Without hints the search enumerates every Latin square."""
        boards = SequentialSolver(size).generate_boards()
        assert len(boards) == LATIN_SQUARE_COUNTS[size]
        assert len(set(boards)) == len(boards)
        assert all(board.check_validity() for board in boards)

    def test_derived_hints_contain_source(self):
        """Solving the hints of a board finds that board."""
        source = SkyscrapersBoard.from_2d_list(REFERENCE_5X5)
        hints = source.compute_hints()

        boards = SequentialSolver(5, hints).generate_boards()
        assert source in boards
        for board in boards:
            assert board.check_validity_with_hints()
            assert board.hints == hints

    def test_partial_hints_contain_source(self):
        """Zeroed hints only widen the result set."""
        source = SkyscrapersBoard.from_2d_list(CYCLIC_GRID)
        full = source.compute_hints()
        partial = full.with_hint(Edge.TOP, 1, 0).with_hint(Edge.RIGHT, 2, 0)

        full_boards = SequentialSolver(4, full).generate_boards()
        partial_boards = SequentialSolver(4, partial).generate_boards()

        assert source in partial_boards
        assert set(full_boards) <= set(partial_boards)

    @pytest.mark.parametrize("hint_string", [
        "0,0,0,0;0,0,0,0;0,0,0,0;2,0,0,0",
        "3,0,0,1;0,2,0,0;0,0,0,0;0,0,0,0",
        "4,3,2,1;1,2,2,2;1,2,2,2;4,3,2,1",
        "0,0,0,0;0,0,0,4;0,3,0,0;0,0,2,0",
    ])
    def test_incremental_and_deferred_agree(self, hint_string):
        """Pruning on partial lines never loses or adds solutions."""
        hints = HintSet.from_string(hint_string)
        incremental = SequentialSolver(4, hints, incremental_hints=True).generate_boards()
        deferred = SequentialSolver(4, hints, incremental_hints=False).generate_boards()
        assert grids(incremental) == grids(deferred)

    def test_incremental_explores_fewer_nodes(self):
        """Hint pruning shrinks the search tree."""
        hints = SkyscrapersBoard.from_2d_list(CYCLIC_GRID).compute_hints()
        incremental = SequentialSolver(4, hints, incremental_hints=True)
        deferred = SequentialSolver(4, hints, incremental_hints=False)
        incremental.generate_boards()
        deferred.generate_boards()
        assert incremental.stats.nodes_explored < deferred.stats.nodes_explored

    def test_no_solution_is_empty(self):
        """Contradictory hints give an empty result, not an error."""
        hints = HintSet.from_string("2,2;0,0;0,0;0,0")
        assert SequentialSolver(2, hints).generate_boards() == []

    def test_cap_stops_early(self):
        """A cap returns exactly that many distinct boards."""
        boards = SequentialSolver(4).generate_boards(max_solutions=10)
        assert len(boards) == 10
        assert len(set(boards)) == 10

    def test_cap_larger_than_total(self):
        """A cap above the total returns everything."""
        boards = SequentialSolver(3).generate_boards(max_solutions=100)
        assert len(boards) == 12

    def test_malformed_input(self):
        """Bad sizes, hint lengths and caps are rejected."""
        with pytest.raises(ValueError):
            SequentialSolver(0)
        with pytest.raises(ValueError):
            SequentialSolver(4, HintSet.zeros(3))
        with pytest.raises(ValueError):
            SequentialSolver(4).generate_boards(max_solutions=0)
        with pytest.raises(ValueError):
            SearchMode.cap(0)

    def test_enumerate_prefixes(self):
        """One full row of an unconstrained 4x4 has 4! prefixes."""
        solver = SequentialSolver(4)
        prefixes = solver.enumerate_prefixes(4)
        assert len(prefixes) == 24
        assert all(prefix[4:] == [0] * 12 for prefix in prefixes)

    def test_enumerate_prefixes_clamped(self):
        """Stop levels outside [0, N*N] are clamped."""
        solver = SequentialSolver(2)
        assert solver.enumerate_prefixes(-1) == [[0, 0, 0, 0]]
        assert len(solver.enumerate_prefixes(99)) == 2

    def test_prefixes_partition_search(self):
        """Searching every prefix reproduces the full result set."""
        hints = HintSet.from_string("0,0,0,0;0,0,0,0;0,0,0,0;2,0,0,0")
        solver = SequentialSolver(4, hints)
        combined = []
        for prefix in solver.enumerate_prefixes(5):
            combined.extend(SequentialSolver(4, hints).search_from(prefix, 5))
        assert grids(combined) == grids(solver.generate_boards())

    def test_search_from_rejects_bad_prefix(self):
        """A prefix repeating a value in a row is a programmer error."""
        solver = SequentialSolver(3)
        with pytest.raises(ValueError):
            solver.search_from([1, 1, 0, 0, 0, 0, 0, 0, 0], 2)
        with pytest.raises(ValueError):
            solver.search_from([0] * 9, 10)

    def test_search_from_hint_conflict(self):
        """A prefix that already breaks a hint yields nothing."""
        hints = HintSet.zeros(3).with_hint(Edge.LEFT, 0, 3)
        solver = SequentialSolver(3, hints)
        assert solver.search_from([3, 0, 0, 0, 0, 0, 0, 0, 0], 1) == []

    def test_should_stop_polled(self):
        """The stop callback ends the search after a complete candidate."""
        seen = []
        solver = SequentialSolver(4)
        boards = solver.search_from(
            [0] * 16, 0,
            should_stop=lambda: len(seen) >= 3,
            on_solution=seen.append,
        )
        assert len(boards) == 3
        assert seen == boards

    def test_solve_collects_stats(self):
        """The BaseSolver API times the run and counts solutions."""
        boards, stats = SequentialSolver(3).solve(SearchMode.cap(5))
        assert len(boards) == 5
        assert stats.solutions == 5
        assert stats.time_seconds > 0
        assert stats.nodes_explored > 0


class TestSolveFunction:
    """Tests for the module-level solve()."""

    def test_exhaustive_default(self):
        """Default mode is exhaustive and unconstrained."""
        assert len(solve(3)) == 12

    def test_cap_mode(self):
        """Capped mode returns at most the cap."""
        hints = SkyscrapersBoard.from_2d_list(CYCLIC_GRID).compute_hints()
        boards = solve(4, hints, SearchMode.cap(1))
        assert len(boards) == 1
        assert boards[0].check_validity_with_hints()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
