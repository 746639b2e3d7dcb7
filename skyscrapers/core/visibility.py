"""Visible-building counting for a single line of a Skyscrapers grid."""

from __future__ import annotations
from typing import Sequence


def count_visibility(line: Sequence[int]) -> int:
    """
    Count how many buildings are visible looking along a line from its start.

    A building is visible iff it is taller than every building before it.
    The tallest building (value N, where N is the line length) is always
    visible and hides everything behind it, so it is credited up front and
    the scan stops as soon as it is reached.

    Args:
        line: Heights in viewing order, a permutation of 1..N.
              Reverse the line to view it from the other end.

    Returns:
        Number of visible buildings, in [1, N].
    """
    size = len(line)
    visible = 1
    running_max = 0

    for height in line:
        if height == size:
            break

        if height > running_max:
            running_max = height
            visible += 1

    return visible
