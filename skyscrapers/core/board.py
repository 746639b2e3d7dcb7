"""Skyscrapers board representation with derived visibility hints."""

from __future__ import annotations
import numpy as np
from typing import List, Optional, Set

from .hints import Edge, HintSet
from .visibility import count_visibility


class SkyscrapersBoard:
    """
    An N x N Skyscrapers grid together with its four hint rows.

    Cells are stored in a flat row-major buffer of N*N heights, 0 meaning
    unassigned. Rows are contiguous slices and columns are strided slices of
    that buffer, so both are returned as live numpy views.

    The hints are either derived from the grid with compute_hints() or
    assigned as a target with set_hints(). They are never updated when cells
    change; recompute them after mutating the grid.
    """

    def __init__(
        self,
        size: int = 4,
        grid: Optional[np.ndarray] = None,
        hints: Optional[HintSet] = None
    ):
        """
        Initialize a board.

        Args:
            size: Board size N (N >= 1).
            grid: Optional initial grid with N*N cells, in any shape that
                  reshapes row-major to (N, N). If None, creates empty board.
            hints: Optional target hints. Defaults to all-zero hints.
        """
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")

        self.size = size

        if grid is not None:
            cells = np.array(grid, dtype=np.int32).reshape(-1)
            if cells.size != size * size:
                raise ValueError(f"Grid must have {size * size} cells, got {cells.size}")
            if cells.min() < 0 or cells.max() > size:
                raise ValueError(f"Grid values must be 0-{size}")
            self.cells = cells
        else:
            self.cells = np.zeros(size * size, dtype=np.int32)

        self.hints = HintSet.zeros(size)
        if hints is not None:
            self.set_hints(hints)

    def resize(self, size: int) -> None:
        """Reallocate an empty grid and zero hints of a new size."""
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        self.size = size
        self.cells = np.zeros(size * size, dtype=np.int32)
        self.hints = HintSet.zeros(size)

    @property
    def grid(self) -> np.ndarray:
        """The cells as an (N, N) view."""
        return self.cells.reshape(self.size, self.size)

    def copy(self) -> SkyscrapersBoard:
        """Create a deep copy of the board, hints included."""
        new_board = SkyscrapersBoard(self.size)
        new_board.cells = self.cells.copy()
        new_board.hints = self.hints
        return new_board

    def _check_index(self, index: int, what: str = "Index") -> None:
        if index < 0 or index >= self.size:
            raise IndexError(f"{what} must be 0-{self.size - 1}, got {index}")

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col). 0 means unassigned."""
        self._check_index(row, "Row")
        self._check_index(col, "Column")
        return int(self.cells[row * self.size + col])

    def set(self, row: int, col: int, value: int) -> None:
        """Set value at position (row, col). Use 0 to clear."""
        self._check_index(row, "Row")
        self._check_index(col, "Column")
        if value < 0 or value > self.size:
            raise ValueError(f"Value must be 0-{self.size}, got {value}")
        self.cells[row * self.size + col] = value

    def clear(self, row: int, col: int) -> None:
        """Clear the cell at position (row, col)."""
        self.set(row, col, 0)

    def fill(self, value: int) -> None:
        """Set every cell to the same value."""
        if value < 0 or value > self.size:
            raise ValueError(f"Value must be 0-{self.size}, got {value}")
        self.cells.fill(value)

    def is_empty(self, row: int, col: int) -> bool:
        """Check if cell is unassigned."""
        return self.get(row, col) == 0

    def get_row(self, row: int) -> np.ndarray:
        """Live view of a row."""
        self._check_index(row, "Row")
        start = row * self.size
        return self.cells[start:start + self.size]

    def get_col(self, col: int) -> np.ndarray:
        """Live view of a column."""
        self._check_index(col, "Column")
        return self.cells[col::self.size]

    def which_edge_row(self, row: int) -> Optional[Edge]:
        """Edge a row lies on (TOP, BOTTOM) or None for interior rows."""
        self._check_index(row, "Row")
        if row == 0:
            return Edge.TOP
        if row == self.size - 1:
            return Edge.BOTTOM
        return None

    def which_edge_col(self, col: int) -> Optional[Edge]:
        """Edge a column lies on (LEFT, RIGHT) or None for interior columns."""
        self._check_index(col, "Column")
        if col == 0:
            return Edge.LEFT
        if col == self.size - 1:
            return Edge.RIGHT
        return None

    def get_line(self, edge: Edge, index: int) -> np.ndarray:
        """
        Row or column as seen from an edge.

        LEFT/RIGHT select row `index`, TOP/BOTTOM select column `index`.
        BOTTOM and RIGHT return the line reversed.
        """
        edge = Edge(edge)
        line = self.get_row(index) if edge.views_rows else self.get_col(index)
        return line[::-1] if edge.is_reversed else line

    def get_candidates(self, row: int, col: int) -> Set[int]:
        """
        Values that can still go in an empty cell.

        Returns:
            Set of values 1..N unused in the cell's row and column.
            Returns empty set if cell is not empty.
        """
        if not self.is_empty(row, col):
            return set()

        used = set(self.get_row(row).tolist()) | set(self.get_col(col).tolist())
        return set(range(1, self.size + 1)) - used

    def count_empty(self) -> int:
        """Count the number of unassigned cells."""
        return int(np.sum(self.cells == 0))

    def count_filled(self) -> int:
        """Count the number of assigned cells."""
        return int(np.sum(self.cells != 0))

    def is_complete(self) -> bool:
        """Check if all cells are assigned."""
        return self.count_empty() == 0

    # Hints

    def get_visible_buildings(self, edge: Edge, index: int) -> int:
        """Number of buildings visible on one line from one edge."""
        return count_visibility(self.get_line(edge, index))

    def compute_hints(self) -> HintSet:
        """Derive hints from the current grid, store and return them."""
        values = [
            [self.get_visible_buildings(edge, i) for i in range(self.size)]
            for edge in Edge
        ]
        self.hints = HintSet.from_lists(*values)
        return self.hints

    def set_hints(self, hints: HintSet) -> None:
        """Assign target hints, validating them against the board size."""
        hints.validate(self.size)
        self.hints = hints

    # Validators

    def check_validity(self) -> bool:
        """
        Check the Latin-square property.

        Returns:
            True iff every row and every column is a permutation of 1..N.
            Unassigned cells make the board invalid.
        """
        expected = np.arange(1, self.size + 1)
        for i in range(self.size):
            if not np.array_equal(np.sort(self.get_row(i)), expected):
                return False
            if not np.array_equal(np.sort(self.get_col(i)), expected):
                return False
        return True

    def check_validity_with_hints(self) -> bool:
        """
        Check the Latin-square property and every non-zero stored hint.

        Returns:
            False on the first violated constraint, True otherwise.
        """
        if not self.check_validity():
            return False

        for edge in Edge:
            for index, hint in enumerate(self.hints.for_edge(edge)):
                if hint != 0 and self.get_visible_buildings(edge, index) != hint:
                    return False

        return True

    # Conversion and persistence

    def to_string(self) -> str:
        """Row-major text: whitespace-separated heights, one row per line."""
        return "\n".join(
            " ".join(str(v) for v in row) for row in self.grid.tolist()
        )

    @classmethod
    def from_string(cls, s: str) -> SkyscrapersBoard:
        """
        Create a board from row-major text.

        Short rows and missing rows are padded with zeros so the result is
        square with the size of the widest row (or the row count, if larger).
        """
        rows = [[int(t) for t in line.split()] for line in s.splitlines() if line.strip()]
        if not rows:
            raise ValueError("No board data found")

        size = max(len(rows), max(len(row) for row in rows))
        grid = np.zeros((size, size), dtype=np.int32)
        for i, row in enumerate(rows):
            grid[i, :len(row)] = row

        return cls(size, grid)

    @classmethod
    def from_2d_list(cls, data: List[List[int]]) -> SkyscrapersBoard:
        """Create a board from a 2D list."""
        arr = np.array(data, dtype=np.int32)
        return cls(arr.shape[0], arr)

    def save_to_file(self, path: str) -> None:
        """Write the grid as plain row-major text."""
        with open(path, "w") as f:
            f.write(self.to_string())
            f.write("\n")

    @classmethod
    def load_from_file(cls, path: str) -> SkyscrapersBoard:
        """Read a grid written by save_to_file."""
        with open(path, "r") as f:
            return cls.from_string(f.read())

    def __str__(self) -> str:
        """Pretty-print the grid framed by its hints."""
        width = len(str(self.size))

        def fmt(v: int) -> str:
            return str(v).rjust(width) if v else ".".rjust(width)

        hints = self.hints
        pad = " " * (width + 1)
        border = pad + "+" + "-" * ((width + 1) * self.size + 1) + "+"

        lines = [pad + "  " + " ".join(fmt(v) for v in hints.top), border]
        for i, row in enumerate(self.grid.tolist()):
            cells = " ".join(fmt(v) for v in row)
            lines.append(f"{fmt(hints.left[i])} | {cells} | {fmt(hints.right[i])}")
        lines.append(border)
        lines.append(pad + "  " + " ".join(fmt(v) for v in hints.bottom))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"SkyscrapersBoard(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SkyscrapersBoard):
            return False
        return self.size == other.size and np.array_equal(self.cells, other.cells)

    def __hash__(self) -> int:
        return hash(self.to_string())
