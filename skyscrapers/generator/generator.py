"""Skyscrapers puzzle generator with configurable difficulty presets."""

from __future__ import annotations
import math
import random
from enum import Enum
from typing import List, Tuple, Optional
import numpy as np

from ..core.board import SkyscrapersBoard
from ..core.hints import Edge
from ..core.validator import has_unique_solution


class Difficulty(Enum):
    """Difficulty presets: how many of the 4N hints stay visible."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def hint_fraction(self) -> Tuple[float, float]:
        """Fraction of hints to keep (min, max)."""
        ranges = {
            Difficulty.EASY: (0.75, 1.0),
            Difficulty.MEDIUM: (0.5, 0.75),
            Difficulty.HARD: (0.0, 0.5),
        }
        return ranges[self]


class SkyscrapersGenerator:
    """
    Generator for Skyscrapers puzzles.

    Algorithm:
    1. Generate a random complete Latin square using backtracking
    2. Derive all four hint rows from it
    3. Hide hints in random order as long as the puzzle keeps a unique solution
    """

    # Full hint sets are not always unique; give up after this many boards
    MAX_ATTEMPTS = 100

    def __init__(self, size: int = 4, seed: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            size: Board size N.
            seed: Random seed for reproducibility.
        """
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        self.size = size
        if seed is not None:
            random.seed(seed)
            np.random.seed(seed)

    def generate(self, difficulty: Difficulty = Difficulty.MEDIUM) -> SkyscrapersBoard:
        """
        Generate a puzzle.

        Returns:
            An empty board whose hints are the puzzle.
        """
        puzzle, _ = self.generate_with_solution(difficulty)
        return puzzle

    def generate_batch(self, count: int, difficulty: Difficulty = Difficulty.MEDIUM) -> List[SkyscrapersBoard]:
        """Generate multiple puzzles of the same difficulty."""
        return [self.generate(difficulty) for _ in range(count)]

    def generate_with_solution(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM
    ) -> Tuple[SkyscrapersBoard, SkyscrapersBoard]:
        """
        Generate a puzzle along with its solution.

        Returns:
            Tuple of (puzzle, solution). The puzzle has an empty grid and the
            kept hints; the solution carries the full derived hints.
        """
        for _ in range(self.MAX_ATTEMPTS):
            solution = self.generate_solution()
            if has_unique_solution(solution.compute_hints()):
                return self._remove_hints(solution, difficulty), solution

        raise RuntimeError(
            f"No uniquely solvable {self.size}x{self.size} board found "
            f"after {self.MAX_ATTEMPTS} attempts"
        )

    def generate_solution(self) -> SkyscrapersBoard:
        """Generate a random complete board with its hints computed."""
        board = SkyscrapersBoard(self.size)

        first_row = list(range(1, self.size + 1))
        random.shuffle(first_row)
        for col, value in enumerate(first_row):
            board.set(0, col, value)

        if not self._fill_remaining(board, self.size):
            raise RuntimeError("Backtracking failed to complete a Latin square")

        board.compute_hints()
        return board

    def _fill_remaining(self, board: SkyscrapersBoard, index: int) -> bool:
        """Fill cells from `index` on in row-major order with shuffled candidates."""
        if index == self.size * self.size:
            return True

        row, col = divmod(index, self.size)
        candidates = list(board.get_candidates(row, col))
        random.shuffle(candidates)  # Randomize for variety

        for val in candidates:
            board.set(row, col, val)
            if self._fill_remaining(board, index + 1):
                return True
            board.clear(row, col)

        return False

    def _remove_hints(self, solution: SkyscrapersBoard, difficulty: Difficulty) -> SkyscrapersBoard:
        """
        Hide hints from a full hint set.

        Ensures the resulting puzzle still has a unique solution.
        """
        hints = solution.compute_hints()
        total = 4 * self.size

        min_frac, max_frac = difficulty.hint_fraction
        low = math.ceil(min_frac * total)
        high = max(low, math.floor(max_frac * total))
        target_hints = random.randint(low, high)

        positions = [(edge, i) for edge in Edge for i in range(self.size)]
        random.shuffle(positions)

        kept = total
        for edge, index in positions:
            if kept <= target_hints:
                break

            candidate = hints.with_hint(edge, index, 0)
            if has_unique_solution(candidate):
                hints = candidate
                kept -= 1

        return SkyscrapersBoard(self.size, hints=hints)

    @staticmethod
    def save_to_folder(
        puzzles: List[Tuple[SkyscrapersBoard, Optional[SkyscrapersBoard]]],
        folder_path: str,
        prefix: str = "puzzle"
    ) -> List[str]:
        """
        Save puzzles as plain text files.

        Each puzzle gets `<prefix>_<i>_hints.txt` (four hint rows) and, when
        a solution is given, `<prefix>_<i>_solution.txt` (row-major grid).

        Args:
            puzzles: (puzzle, solution or None) pairs.
            folder_path: Directory to save the puzzles.
            prefix: Prefix for the filenames.

        Returns:
            Paths of the written hint files.
        """
        import os
        os.makedirs(folder_path, exist_ok=True)

        written = []
        for i, (puzzle, solution) in enumerate(puzzles, 1):
            hints_path = os.path.join(folder_path, f"{prefix}_{i}_hints.txt")
            with open(hints_path, "w") as f:
                f.write(puzzle.hints.to_text())
                f.write("\n")
            written.append(hints_path)

            if solution is not None:
                solution.save_to_file(os.path.join(folder_path, f"{prefix}_{i}_solution.txt"))

        return written
