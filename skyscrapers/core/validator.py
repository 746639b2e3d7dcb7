"""Validation utilities for Skyscrapers puzzles."""

from __future__ import annotations
from typing import TYPE_CHECKING

from .hints import Edge, HintSet
from .visibility import count_visibility

if TYPE_CHECKING:
    from .board import SkyscrapersBoard


def is_valid_placement(board: SkyscrapersBoard, row: int, col: int, value: int) -> bool:
    """
    Check if placing a value at (row, col) keeps rows and columns distinct.

    Args:
        board: The board.
        row: Row index.
        col: Column index.
        value: Value to check (1 to board.size).

    Returns:
        True if the placement is valid.
    """
    if value < 1 or value > board.size:
        return False

    if value in board.get_row(row):
        return False

    if value in board.get_col(col):
        return False

    return True


def is_latin_square(board: SkyscrapersBoard) -> bool:
    """Every row and column is a permutation of 1..N."""
    return board.check_validity()


def matches_hints(board: SkyscrapersBoard, hints: HintSet) -> bool:
    """
    Check a complete grid against an arbitrary hint set.

    Unlike board.check_validity_with_hints(), this leaves the board's own
    stored hints untouched.
    """
    if hints.size != board.size or not board.check_validity():
        return False

    for edge in Edge:
        for index, hint in enumerate(hints.for_edge(edge)):
            if hint != 0 and count_visibility(board.get_line(edge, index)) != hint:
                return False

    return True


def count_solutions(hints: HintSet, limit: int = 2) -> int:
    """
    Count the boards matching a hint set, stopping once limit is reached.

    Args:
        hints: Target hints.
        limit: Maximum solutions to count before stopping.

    Returns:
        Number of solutions found (up to limit).
    """
    from ..solvers.sequential_solver import SequentialSolver

    solver = SequentialSolver(hints.size, hints)
    return len(solver.generate_boards(max_solutions=limit))


def has_unique_solution(hints: HintSet) -> bool:
    """Check if exactly one board matches the hints."""
    return count_solutions(hints, limit=2) == 1


def validate_solution(hints: HintSet, solution: SkyscrapersBoard) -> bool:
    """
    Validate that a board solves a puzzle.

    Args:
        hints: The puzzle hints.
        solution: The proposed solution.

    Returns:
        True if the solution is a complete Latin square matching every hint.
    """
    if hints.size != solution.size:
        return False
    return matches_hints(solution, hints)
