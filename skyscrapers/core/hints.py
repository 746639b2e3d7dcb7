"""Edges and hint sets for Skyscrapers puzzles."""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Sequence, Tuple

import numpy as np


class Edge(IntEnum):
    """Grid edge a line is viewed from."""
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3

    @property
    def views_rows(self) -> bool:
        """LEFT and RIGHT look along rows, TOP and BOTTOM along columns."""
        return self in (Edge.LEFT, Edge.RIGHT)

    @property
    def is_reversed(self) -> bool:
        """BOTTOM and RIGHT read their line from index N-1 backwards."""
        return self in (Edge.BOTTOM, Edge.RIGHT)


_FIELDS = {
    Edge.TOP: "top",
    Edge.RIGHT: "right",
    Edge.BOTTOM: "bottom",
    Edge.LEFT: "left",
}


@dataclass(frozen=True)
class HintSet:
    """
    Visible-building hints for all four edges.

    Each edge holds N entries, indexed by column (TOP/BOTTOM) or row
    (LEFT/RIGHT). A value of 0 means the line is unconstrained.
    """
    top: Tuple[int, ...]
    right: Tuple[int, ...]
    bottom: Tuple[int, ...]
    left: Tuple[int, ...]

    def __post_init__(self):
        # Normalise whatever sequences were passed into tuples of ints
        for field_name in _FIELDS.values():
            values = tuple(int(v) for v in getattr(self, field_name))
            object.__setattr__(self, field_name, values)

    @classmethod
    def zeros(cls, size: int) -> HintSet:
        """Fully unconstrained hints for a board of the given size."""
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        empty = (0,) * size
        return cls(empty, empty, empty, empty)

    @classmethod
    def from_lists(
        cls,
        top: Sequence[int],
        right: Sequence[int],
        bottom: Sequence[int],
        left: Sequence[int]
    ) -> HintSet:
        """Create hints from four sequences in TOP, RIGHT, BOTTOM, LEFT order."""
        return cls(tuple(top), tuple(right), tuple(bottom), tuple(left))

    @classmethod
    def from_string(cls, s: str) -> HintSet:
        """
        Parse hints from a compact string.

        Args:
            s: Four semicolon-separated groups in TOP;RIGHT;BOTTOM;LEFT order,
               each a comma-separated list of numbers, e.g.
               "2,1,3,2;2,3,1,2;2,3,1,2;3,2,1,2".
        """
        groups = [g.strip() for g in s.strip().split(";")]
        if len(groups) != 4:
            raise ValueError(f"Expected 4 hint groups separated by ';', got {len(groups)}")

        parsed = []
        for group in groups:
            try:
                parsed.append([int(v) for v in group.split(",")])
            except ValueError:
                raise ValueError(f"Invalid hint group: {group!r}") from None

        hints = cls.from_lists(*parsed)
        hints.validate(hints.size)
        return hints

    def to_string(self) -> str:
        """Inverse of from_string."""
        return ";".join(
            ",".join(str(v) for v in self.for_edge(edge)) for edge in Edge
        )

    @classmethod
    def from_text(cls, text: str) -> HintSet:
        """
        Parse hints written by to_text(): four lines of whitespace-separated
        numbers in TOP, RIGHT, BOTTOM, LEFT order.
        """
        rows = [[int(t) for t in line.split()] for line in text.splitlines() if line.strip()]
        if len(rows) != 4:
            raise ValueError(f"Expected 4 hint rows, got {len(rows)}")

        hints = cls.from_lists(*rows)
        hints.validate(hints.size)
        return hints

    def to_text(self) -> str:
        """Plain text, one edge per line."""
        return "\n".join(
            " ".join(str(v) for v in self.for_edge(edge)) for edge in Edge
        )

    @classmethod
    def from_dict(cls, data: Dict[str, List[int]]) -> HintSet:
        """Create hints from a dict with top/right/bottom/left keys."""
        return cls.from_lists(data["top"], data["right"], data["bottom"], data["left"])

    def to_dict(self) -> Dict[str, List[int]]:
        """Convert to a JSON-friendly dictionary."""
        return {name: list(getattr(self, name)) for name in _FIELDS.values()}

    @property
    def size(self) -> int:
        return len(self.top)

    def for_edge(self, edge: Edge) -> Tuple[int, ...]:
        """Hints for one edge."""
        return getattr(self, _FIELDS[Edge(edge)])

    def __getitem__(self, edge: Edge) -> Tuple[int, ...]:
        return self.for_edge(edge)

    def as_array(self) -> np.ndarray:
        """Hints as a (4, N) array, rows in Edge order."""
        return np.array([self.for_edge(edge) for edge in Edge], dtype=np.int32)

    def constrained_count(self) -> int:
        """Number of non-zero hints."""
        return int(np.count_nonzero(self.as_array()))

    def is_unconstrained(self) -> bool:
        return self.constrained_count() == 0

    def with_hint(self, edge: Edge, index: int, value: int) -> HintSet:
        """Return a copy with a single hint replaced."""
        values = list(self.for_edge(edge))
        values[index] = value
        return replace(self, **{_FIELDS[Edge(edge)]: tuple(values)})

    def validate(self, size: int) -> None:
        """
        Check that these hints fit a board of the given size.

        Raises:
            ValueError: If any edge has the wrong length or a hint lies
                        outside [0, size].
        """
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")

        for edge in Edge:
            values = self.for_edge(edge)
            if len(values) != size:
                raise ValueError(
                    f"{edge.name} hints must have {size} entries, got {len(values)}"
                )
            for v in values:
                if v < 0 or v > size:
                    raise ValueError(f"{edge.name} hint must be 0-{size}, got {v}")

    def __str__(self) -> str:
        return "\n".join(
            f"{edge.name:<6} " + " ".join(str(v) for v in self.for_edge(edge))
            for edge in Edge
        )
