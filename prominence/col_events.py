"""
Peak-per-col prominence.

Cells are uncovered from the tallest down, one elevation level at a time.
Whenever a cell touches two or more separate mountains it is a col: the
mountains are merged there and the lower summit's prominence is locked in as
summit elevation minus col elevation. Unlike the drainage-basin calculator
this keeps every summit that ever meets a higher one, each with its own col.
"""

import logging
from typing import List, Optional, Tuple

from prominence.config import DEFAULT_MIN_ELEVATION, DEFAULT_MIN_PROMINENCE, PROGRESS_INTERVAL
from prominence.grid import ElevationGrid
from prominence.peak import Peak
from prominence.progress import (
    COLLECTED,
    FINISHED,
    INITIALIZED,
    STARTED,
    WALKED,
    WALKING,
    Observer,
    ProgressReporter,
)

logger = logging.getLogger(__name__)


class ColEventUnionFind:
    # Every cell is its own island and its own summit
    def __init__(self, elevations: List[int]):
        size = len(elevations)
        self.elevations = elevations
        self.parent = list(range(size))
        self.rank = [0] * size
        self.summit = list(range(size))
        # (prominence, summit index, col index)
        self.records: List[Tuple[int, int, int]] = []

    def find(self, x: int) -> int:
        parent = self.parent
        root = x
        while parent[root] != root:
            root = parent[root]
        while parent[x] != root:
            next_x = parent[x]
            parent[x] = root
            x = next_x
        return root

    def union(self, x: int, y: int, col: Optional[int] = None) -> int:
        """
        Join two mountains. When `col` is given the merge happens at that cell
        and the lower summit gets a prominence record.
        """
        rx, ry = self.find(x), self.find(y)
        if rx == ry:
            return rx

        # Read summits before parents/ranks change
        summit_x, summit_y = self.summit[rx], self.summit[ry]
        if self.elevations[summit_x] >= self.elevations[summit_y]:
            higher, lower = summit_x, summit_y
        else:
            higher, lower = summit_y, summit_x

        if col is not None:
            prominence = self.elevations[lower] - self.elevations[col]
            self.records.append((prominence, lower, col))

        if self.rank[rx] < self.rank[ry]:
            rx, ry = ry, rx
        elif self.rank[rx] == self.rank[ry]:
            self.rank[rx] += 1
        self.parent[ry] = rx

        self.summit[rx] = higher
        return rx


class ColEventCalculator(ProgressReporter):
    """Prominence by recording the lower summit at every col merge."""

    def __init__(
        self,
        grid: ElevationGrid,
        progress_interval: int = PROGRESS_INTERVAL,
        observer: Optional[Observer] = None,
    ):
        super().__init__(observer)
        self.grid = grid
        self.progress_interval = progress_interval

    def calculate_prominence(
        self,
        min_elevation: int = DEFAULT_MIN_ELEVATION,
        min_prominence: int = DEFAULT_MIN_PROMINENCE,
    ) -> List[Peak]:
        self.start_clock()
        self.emit(STARTED, "Starting col-event prominence calculation...")

        elevations = self.grid.data.ravel().tolist()
        # Sorting tallest to shortest
        order = self.grid.eligible_indices(min_elevation, descending=True).tolist()
        total = len(order)
        uf = ColEventUnionFind(elevations)
        active = [False] * self.grid.size
        self.emit(INITIALIZED, f"Initialized: {total} cells at or above {min_elevation}", 0, total)

        self.emit(WALKING, f"Processing {total} cells in descending elevation order...", 0, total)
        next_report = self.progress_interval
        i = 0
        while i < total:
            height = elevations[order[i]]
            j = i
            while j < total and elevations[order[j]] == height:
                j += 1
            level = order[i:j]

            # Uncover every cell at this height first
            for index in level:
                active[index] = True

            # Equal-height neighbors are one piece of terrain, no col between them
            for index in level:
                row, col = divmod(index, self.grid.width)
                for neighbor in self.grid.neighbors(row, col):
                    if active[neighbor] and elevations[neighbor] == height:
                        uf.union(index, neighbor)

            for index in level:
                self.check_neighbors(uf, index, active)

            i = j
            if i >= next_report:
                self.emit(WALKING, f"Processed {i}/{total} cells ({i / total * 100:.1f}%)", i, total)
                next_report = (i // self.progress_interval + 1) * self.progress_interval

        self.emit(WALKING, f"Processed {total}/{total} cells (100.0%)", total, total)
        self.emit(WALKED, f"Col merges completed in {self.elapsed:.2f}s", total, total)

        peaks = self.collect_peaks(uf, order, min_prominence)
        self.emit(COLLECTED, f"Collected {len(peaks)} peaks from {len(uf.records)} col events", len(peaks), len(peaks))
        self.emit(FINISHED, f"Total calculation time: {self.elapsed:.2f}s")
        return peaks

    def check_neighbors(self, uf: ColEventUnionFind, index: int, active: List[bool]):
        row, col = divmod(index, self.grid.width)

        # Distinct mountains touching this cell, in neighbor order
        roots = []
        for neighbor in self.grid.neighbors(row, col):
            if active[neighbor]:
                root = uf.find(neighbor)
                if root not in roots:
                    roots.append(root)

        if not roots:
            return

        if len(roots) == 1:
            uf.union(index, roots[0])
            return

        # Two or more mountains meet here, so this cell is their col
        merged = roots[0]
        for other in roots[1:]:
            if uf.find(merged) != uf.find(other):
                merged = uf.union(merged, other, col=index)

        uf.union(merged, index)

    def collect_peaks(self, uf: ColEventUnionFind, order: List[int], min_prominence: int) -> List[Peak]:
        width = self.grid.width
        elevations = uf.elevations
        peaks = []

        for prominence, summit, col in uf.records:
            if prominence <= 0 or prominence < min_prominence:
                continue
            row, column = divmod(summit, width)
            col_row, col_col = divmod(col, width)
            peaks.append(
                Peak(row, column, elevations[summit], prominence).with_saddle(
                    col_row, col_col, elevations[col]
                )
            )

        # The tallest summit never meets anything higher, measure it from sea level
        if order:
            summit = uf.summit[uf.find(order[0])]
            prominence = elevations[summit]
            if prominence > 0 and prominence >= min_prominence:
                row, column = divmod(summit, width)
                peaks.append(Peak(row, column, prominence, prominence))

        logger.debug(f"{len(uf.records)} col events, {len(peaks)} peaks kept")
        return sorted(peaks, key=lambda p: p.prominence, reverse=True)
