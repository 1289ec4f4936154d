"""
Tests for the peak-per-col calculator.
"""

import numpy as np

from prominence.col_events import ColEventCalculator, ColEventUnionFind
from prominence.grid import ElevationGrid
from prominence.peak import Peak
from prominence.progress import FINISHED, STARTED, silent


class TestColEventUnionFind:
    """Tests for summit tracking and col records."""

    def test_union_without_col_records_nothing(self):
        uf = ColEventUnionFind([5, 3, 1])
        uf.union(0, 1)

        assert uf.records == []
        assert uf.summit[uf.find(1)] == 0

    def test_col_records_lower_summit(self):
        uf = ColEventUnionFind([5, 1, 3])
        root = uf.union(0, 2, col=1)

        assert uf.records == [(2, 2, 1)]
        assert uf.summit[root] == 0

    def test_equal_summits_record_second(self):
        uf = ColEventUnionFind([4, 1, 4])
        uf.union(0, 2, col=1)

        assert uf.records == [(3, 2, 1)]

    def test_union_same_set_returns_root(self):
        uf = ColEventUnionFind([1, 2])
        root = uf.union(0, 1)

        assert uf.union(1, 0, col=0) == root
        assert uf.records == []


class TestColEventCalculator:
    """Every summit meeting higher ground at a col gets its own record."""

    def test_ridge_keeps_every_summit(self, ridge_grid):
        peaks = ColEventCalculator(ridge_grid, observer=silent).calculate_prominence(1, 1)

        assert peaks == [
            Peak(1, 5, 8, 8),
            Peak(1, 1, 5, 4, saddle_row=1, saddle_col=4, saddle_elevation=1),
            Peak(1, 3, 2, 1, saddle_row=1, saddle_col=2, saddle_elevation=1),
        ]

    def test_threshold_filters_records(self, ridge_grid):
        peaks = ColEventCalculator(ridge_grid, observer=silent).calculate_prominence(1, 4)

        assert [peak.prominence for peak in peaks] == [8, 4]

    def test_central_summit_only(self, pattern_grid):
        """Flat sea-level ground meeting the massif gives a zero record, dropped."""
        peaks = ColEventCalculator(pattern_grid, observer=silent).calculate_prominence(0, 1)

        assert peaks == [Peak(2, 2, 5, 5)]

    def test_no_eligible_cells(self, pattern_grid):
        assert ColEventCalculator(pattern_grid, observer=silent).calculate_prominence(6, 1) == []

    def test_two_summits_share_a_col(self):
        grid = ElevationGrid(np.array([
            [1, 1, 1, 1, 1],
            [1, 6, 3, 9, 1],
            [1, 1, 1, 1, 1],
        ]))

        peaks = ColEventCalculator(grid, observer=silent).calculate_prominence(2, 1)

        assert peaks == [
            Peak(1, 3, 9, 9),
            Peak(1, 1, 6, 3, saddle_row=1, saddle_col=2, saddle_elevation=3),
        ]

    def test_emits_progress(self, ridge_grid):
        events = []
        ColEventCalculator(ridge_grid, observer=events.append).calculate_prominence(1, 1)

        assert events[0].stage == STARTED
        assert events[-1].stage == FINISHED
