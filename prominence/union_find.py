"""
Union-Find over grid cells, augmented with drainage-basin state.

Each component root carries:
- the dominant (highest) peak seen inside the component,
- the key saddle: the lowest merge elevation recorded while the component
  was still enclosed,
- whether any of its cells lies on the grid border (drains to sea level).

Only root slots are meaningful. Every read goes through find().
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from prominence.peak import Peak

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Component:
    """Snapshot of the aggregate state stored at a component root."""

    root: int
    peak_index: Optional[int]
    peak_elevation: Optional[int]
    saddle_index: Optional[int]
    saddle_elevation: Optional[int]
    drains_to_boundary: bool


class DrainageUnionFind:
    # One slot per cell, every cell starts as its own component
    def __init__(self, width: int, height: int):
        size = width * height
        self.width = width
        self.height = height
        self.parent = list(range(size))
        self.rank = [0] * size
        self.peak_elevation: List[Optional[int]] = [None] * size
        self.peak_index: List[Optional[int]] = [None] * size
        self.saddle_elevation: List[Optional[int]] = [None] * size
        self.saddle_index: List[Optional[int]] = [None] * size
        self.drains_to_boundary = [False] * size

    def __len__(self):
        return len(self.parent)

    def find(self, x: int) -> int:
        """Root of x's component, compressing the path behind it."""
        parent = self.parent

        root = x
        while parent[root] != root:
            root = parent[root]

        while parent[x] != root:
            next_x = parent[x]
            parent[x] = root
            x = next_x

        return root

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def mark_as_peak(self, index: int, elevation: int):
        """Record index as the component's peak if it beats the current one."""
        root = self.find(index)
        current = self.peak_elevation[root]
        if current is None or elevation > current:
            self.peak_elevation[root] = elevation
            self.peak_index[root] = index

    def mark_boundary(self, index: int):
        self.drains_to_boundary[self.find(index)] = True

    def union(self, x: int, y: int, event_elevation: int, event_index: int) -> Optional[int]:
        """
        Merge the components of x and y at a cell of elevation event_elevation.

        Returns the surviving root, or None when x and y were already joined.
        """
        root_x, root_y = self.find(x), self.find(y)
        if root_x == root_y:
            return None

        # Union by rank, ties keep root_x on top
        if self.rank[root_x] >= self.rank[root_y]:
            keep, absorb = root_x, root_y
        else:
            keep, absorb = root_y, root_x
        if self.rank[root_x] == self.rank[root_y]:
            self.rank[keep] += 1

        self._merge_state(keep, absorb, event_elevation, event_index)
        self.parent[absorb] = keep
        return keep

    def _merge_state(self, keep: int, absorb: int, event_elevation: int, event_index: int):
        drains = self.drains_to_boundary[keep] or self.drains_to_boundary[absorb]
        self.drains_to_boundary[keep] = drains

        # Keep the higher peak; adopt the absorbed one if we had none
        absorbed_peak = self.peak_elevation[absorb]
        kept_peak = self.peak_elevation[keep]
        if absorbed_peak is not None and (kept_peak is None or absorbed_peak > kept_peak):
            self.peak_elevation[keep] = absorbed_peak
            self.peak_index[keep] = self.peak_index[absorb]

        # Sea level is the reference once the basin reaches the border
        if drains:
            return

        saddle = self.saddle_elevation[keep]
        if saddle is None or event_elevation < saddle:
            self.saddle_elevation[keep] = event_elevation
            self.saddle_index[keep] = event_index

        absorbed_saddle = self.saddle_elevation[absorb]
        if absorbed_saddle is not None and absorbed_saddle < self.saddle_elevation[keep]:
            self.saddle_elevation[keep] = absorbed_saddle
            self.saddle_index[keep] = self.saddle_index[absorb]

    def component(self, index: int) -> Component:
        root = self.find(index)
        return Component(
            root=root,
            peak_index=self.peak_index[root],
            peak_elevation=self.peak_elevation[root],
            saddle_index=self.saddle_index[root],
            saddle_elevation=self.saddle_elevation[root],
            drains_to_boundary=self.drains_to_boundary[root],
        )

    def prominence_of(self, root: int) -> int:
        peak_elevation = self.peak_elevation[root]
        if peak_elevation is None:
            return 0
        if self.drains_to_boundary[root]:
            return peak_elevation
        saddle_elevation = self.saddle_elevation[root]
        if saddle_elevation is None:
            return 0
        return peak_elevation - saddle_elevation

    def collect_peaks(self, min_prominence: int) -> List[Peak]:
        """
        One Peak per distinct component that holds a peak, sorted by
        descending prominence. Entries with prominence <= 0 or below
        min_prominence are dropped.
        """
        peaks: Dict[int, Peak] = {}
        seen = set()

        for i in range(len(self.parent)):
            root = self.find(i)
            peak_index = self.peak_index[root]
            if peak_index is None or peak_index in seen:
                continue
            seen.add(peak_index)

            prominence = self.prominence_of(root)
            if prominence >= min_prominence and prominence > 0:
                peaks[peak_index] = self._make_peak(root, prominence)

        logger.info(
            f"Found {len(seen)} components with peaks, "
            f"{len(peaks)} valid peaks with prominence >= {min_prominence}"
        )
        return sorted(peaks.values(), key=lambda p: p.prominence, reverse=True)

    def _make_peak(self, root: int, prominence: int) -> Peak:
        peak_index = self.peak_index[root]
        row, col = divmod(peak_index, self.width)
        peak = Peak(row, col, self.peak_elevation[root]).with_prominence(prominence)

        saddle_index = self.saddle_index[root]
        if not self.drains_to_boundary[root] and saddle_index is not None:
            saddle_row, saddle_col = divmod(saddle_index, self.width)
            peak = peak.with_saddle(saddle_row, saddle_col, self.saddle_elevation[root])
        return peak
