"""Unit tests for visible-building counting."""

import itertools

import numpy as np
import pytest
from skyscrapers.core.visibility import count_visibility


def naive_count(line):
    """Reference: a building is visible if it beats everything before it."""
    return sum(
        1 for i, height in enumerate(line)
        if all(height > previous for previous in line[:i])
    )


class TestCountVisibility:
    """Tests for count_visibility."""

    @pytest.mark.parametrize("size", range(1, 9))
    def test_matches_naive_scan_for_all_permutations(self, size):
        """Optimized counter agrees with the O(N^2) scan on every permutation."""
        for perm in itertools.permutations(range(1, size + 1)):
            assert count_visibility(perm) == naive_count(perm)

    def test_single_building(self):
        """A lone building is always visible."""
        assert count_visibility([1]) == 1

    def test_ascending_and_descending(self):
        """Ascending shows everything, descending only the first."""
        assert count_visibility([1, 2, 3, 4]) == 4
        assert count_visibility([4, 3, 2, 1]) == 1

    def test_reversal_asymmetry(self):
        """Viewing from the other end can give a different count."""
        line = [1, 2, 3, 4]
        assert count_visibility(line) == 4
        assert count_visibility(line[::-1]) == 1

    def test_numpy_views(self):
        """Works on numpy arrays and reversed views."""
        line = np.array([2, 1, 4, 3], dtype=np.int32)
        assert count_visibility(line) == 2
        assert count_visibility(line[::-1]) == 2

    def test_occluded_buildings_ignored(self):
        """Shorter buildings behind a taller one are hidden."""
        assert count_visibility([3, 1, 2, 5, 4]) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
