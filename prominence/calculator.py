"""
Drainage-basin prominence calculation.

Cells at or above a minimum elevation are replayed in elevation order
(highest first by default). Each cell is unioned with the neighbors that were
already visited, and the augmented union-find keeps track of the dominant
peak, key saddle and border drainage of every component. When the walk is
done each surviving component yields at most one Peak.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from prominence.col_events import ColEventCalculator
from prominence.config import DEFAULT_MIN_ELEVATION, DEFAULT_MIN_PROMINENCE, PROGRESS_INTERVAL
from prominence.errors import ProcessingError
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
from prominence.union_find import DrainageUnionFind

logger = logging.getLogger(__name__)

UNION_FIND = "union-find"
COL_EVENTS = "col-events"
METHODS = (UNION_FIND, COL_EVENTS)


@dataclass
class ProminenceSettings:
    min_elevation: int = DEFAULT_MIN_ELEVATION
    min_prominence: int = DEFAULT_MIN_PROMINENCE
    descending: bool = True
    progress_interval: int = PROGRESS_INTERVAL

    def __post_init__(self):
        if self.progress_interval <= 0:
            raise ValueError(f"progress_interval must be positive, got {self.progress_interval}")


class ProminenceCalculator(ProgressReporter):
    """
    Computes one Peak per connected terrain component.

    Args:
        grid: Elevation grid, shared read-only.
        descending: Process cells from highest to lowest (default). False
            replays them from lowest to highest.
        progress_interval: Cells between two "walking" events.
        observer: Callable receiving ProgressEvent values. Defaults to
            logging them at INFO.
    """

    def __init__(
        self,
        grid: ElevationGrid,
        descending: bool = True,
        progress_interval: int = PROGRESS_INTERVAL,
        observer: Optional[Observer] = None,
    ):
        super().__init__(observer)
        self.grid = grid
        self.descending = descending
        self.progress_interval = progress_interval

    def calculate_prominence(
        self,
        min_elevation: int = DEFAULT_MIN_ELEVATION,
        min_prominence: int = DEFAULT_MIN_PROMINENCE,
    ) -> List[Peak]:
        """
        Run one full pass and return peaks sorted by descending prominence.

        Raises:
            ProcessingError: A neighbor index resolved outside the grid.
        """
        self.start_clock()
        self.emit(STARTED, "Starting prominence calculation...")

        uf = DrainageUnionFind(self.grid.width, self.grid.height)
        elevations = self.grid.data.ravel().tolist()
        order = self.grid.eligible_indices(min_elevation, descending=self.descending).tolist()

        self.initialize_union_find(uf, order, elevations)
        self.process_cells(uf, order, elevations)

        peaks = uf.collect_peaks(min_prominence)
        self.emit(COLLECTED, f"Collected {len(peaks)} peaks", len(peaks), len(peaks))
        self.emit(
            FINISHED,
            f"Total calculation time: {self.elapsed:.2f}s",
        )
        return peaks

    def initialize_union_find(self, uf: DrainageUnionFind, order: List[int], elevations: List[int]):
        """Mark border cells and local maxima before any union happens."""
        is_peak = self.grid.local_maxima_mask().ravel().tolist()
        on_boundary = self.grid.boundary_mask().ravel().tolist()

        peak_count = 0
        boundary_count = 0
        for index in order:
            if on_boundary[index]:
                uf.mark_boundary(index)
                boundary_count += 1
            if is_peak[index]:
                uf.mark_as_peak(index, elevations[index])
                peak_count += 1

        self.emit(
            INITIALIZED,
            f"Initialized: {peak_count} peaks, {boundary_count} boundary cells",
            peak_count,
            len(order),
        )

    def process_cells(self, uf: DrainageUnionFind, order: List[int], elevations: List[int]):
        processed = [False] * self.grid.size
        width = self.grid.width
        total = len(order)
        direction = "descending" if self.descending else "ascending"
        self.emit(WALKING, f"Processing {total} cells in {direction} elevation order...", 0, total)

        for i, index in enumerate(order):
            if i and i % self.progress_interval == 0:
                self.emit(
                    WALKING,
                    f"Processed {i}/{total} cells ({i / total * 100:.1f}%)",
                    i,
                    total,
                )
            processed[index] = True
            row, col = divmod(index, width)
            self.connect_to_neighbors(uf, index, row, col, elevations[index], processed)

        self.emit(WALKING, f"Processed {total}/{total} cells (100.0%)", total, total)
        self.emit(
            WALKED,
            f"Union-find completed in {self.elapsed:.2f}s",
            total,
            total,
        )

    def connect_to_neighbors(
        self,
        uf: DrainageUnionFind,
        index: int,
        row: int,
        col: int,
        elevation: int,
        processed: List[bool],
    ):
        for neighbor in self.grid.neighbors(row, col):
            if not processed[neighbor]:
                continue

            n_row, n_col = self.grid.index_to_coords(neighbor)
            n_elevation = self.grid.elevation(n_row, n_col)
            if n_elevation is None:
                raise ProcessingError(f"Invalid neighbor coordinates: ({n_row}, {n_col})")

            # Visited neighbors sit on the far side of the sweep
            if self.descending:
                reached = n_elevation >= elevation
            else:
                reached = n_elevation <= elevation
            if reached:
                uf.union(index, neighbor, elevation, index)


def calculate(
    grid: ElevationGrid,
    settings: Optional[ProminenceSettings] = None,
    method: str = UNION_FIND,
    observer: Optional[Observer] = None,
) -> List[Peak]:
    """
    Compute peaks for `grid` with the chosen strategy.

    "union-find" keeps one peak per connected component and measures it
    against the lowest enclosing merge or sea level. "col-events" records a
    peak at every col where two summits meet.
    """
    settings = settings or ProminenceSettings()
    logger.debug(f"Running {method} on {grid!r} with {settings}")
    if method == UNION_FIND:
        calculator = ProminenceCalculator(
            grid,
            descending=settings.descending,
            progress_interval=settings.progress_interval,
            observer=observer,
        )
        return calculator.calculate_prominence(settings.min_elevation, settings.min_prominence)
    if method == COL_EVENTS:
        calculator = ColEventCalculator(
            grid, progress_interval=settings.progress_interval, observer=observer
        )
        return calculator.calculate_prominence(settings.min_elevation, settings.min_prominence)
    raise ValueError(f"Unknown method: {method!r} (expected one of {', '.join(METHODS)})")
