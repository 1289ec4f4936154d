"""
Elevation grid and cell ordering.

The grid owns the DEM samples and only answers local questions about them
(elevation, 8-connected neighbors, local maxima, border cells). Cells are
addressed either by (row, col) or by the flat row-major index
``row * width + col`` used as the key of every per-cell array.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from prominence.errors import InvalidDimensionsError, InvalidElevationError

# 8-connected neighborhood, row offset first
NEIGHBOR_OFFSETS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]

_INT16 = np.iinfo(np.int16)


@dataclass(frozen=True)
class Cell:
    """One grid sample. Cells compare by elevation only."""

    elevation: int
    row: int
    col: int
    index: int

    @classmethod
    def at(cls, elevation: int, row: int, col: int, width: int) -> "Cell":
        return cls(elevation, row, col, row * width + col)

    def __lt__(self, other: "Cell") -> bool:
        return self.elevation < other.elevation

    def __le__(self, other: "Cell") -> bool:
        return self.elevation <= other.elevation

    def __gt__(self, other: "Cell") -> bool:
        return self.elevation > other.elevation

    def __ge__(self, other: "Cell") -> bool:
        return self.elevation >= other.elevation


def _as_int16(arr: np.ndarray) -> np.ndarray:
    if np.issubdtype(arr.dtype, np.integer):
        if arr.min() < _INT16.min or arr.max() > _INT16.max:
            raise InvalidElevationError(
                f"Elevations must fit in 16 bits, got range {arr.min()}..{arr.max()}"
            )
    elif np.issubdtype(arr.dtype, np.floating):
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.round(arr)):
            raise InvalidElevationError("Elevations must be whole numbers")
        if arr.min() < _INT16.min or arr.max() > _INT16.max:
            raise InvalidElevationError(
                f"Elevations must fit in 16 bits, got range {arr.min()}..{arr.max()}"
            )
    else:
        raise InvalidElevationError(f"Unsupported elevation dtype: {arr.dtype}")
    return arr.astype(np.int16)


class ElevationGrid:
    """Read-only rectangular grid of signed 16-bit elevations."""

    def __init__(self, samples):
        if isinstance(samples, np.ndarray):
            if samples.ndim != 2:
                raise InvalidDimensionsError(f"Grid must be 2-D, got {samples.ndim}-D")
            arr = samples
        else:
            rows = [list(row) for row in samples]
            if not rows:
                raise InvalidDimensionsError("Grid has no rows")
            width = len(rows[0])
            for i, row in enumerate(rows):
                if len(row) != width:
                    raise InvalidDimensionsError(
                        f"Row {i} has {len(row)} samples, expected {width}"
                    )
            arr = np.array(rows).reshape(len(rows), width)

        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidDimensionsError(f"Grid has an empty dimension: {arr.shape}")

        self.data = _as_int16(arr)
        self.data.setflags(write=False)
        self.height, self.width = self.data.shape

    def __repr__(self):
        return f"ElevationGrid(width={self.width}, height={self.height})"

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def size(self) -> int:
        return self.width * self.height

    def index(self, row: int, col: int) -> int:
        return row * self.width + col

    def index_to_coords(self, index: int) -> Tuple[int, int]:
        return index // self.width, index % self.width

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def elevation(self, row: int, col: int) -> Optional[int]:
        """Elevation at (row, col), or None outside the grid."""
        if not self.in_bounds(row, col):
            return None
        return int(self.data[row, col])

    def neighbors(self, row: int, col: int) -> List[int]:
        """Flat indices of the up to 8 in-bounds neighbors, in NEIGHBOR_OFFSETS order."""
        found = []
        for dr, dc in NEIGHBOR_OFFSETS:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.height and 0 <= nc < self.width:
                found.append(nr * self.width + nc)
        return found

    def is_local_maximum(self, row: int, col: int) -> bool:
        """
        No neighbor is higher and at least one neighbor is lower.

        A cell surrounded only by equal neighbors (a flat plateau) is not a
        local maximum.
        """
        elevation = self.elevation(row, col)
        if elevation is None:
            return False

        has_lower = False
        for dr, dc in NEIGHBOR_OFFSETS:
            neighbor = self.elevation(row + dr, col + dc)
            if neighbor is None:
                continue
            if neighbor > elevation:
                return False
            if neighbor < elevation:
                has_lower = True
        return has_lower

    def is_on_boundary(self, row: int, col: int) -> bool:
        return row == 0 or row == self.height - 1 or col == 0 or col == self.width - 1

    def local_maxima_mask(self) -> np.ndarray:
        """Vectorized is_local_maximum over the whole grid. True = local maximum."""
        H, W = self.data.shape
        arr = self.data.astype(np.int32)
        info = np.iinfo(np.int32)
        # Padding never counts as higher (first pad) or lower (second pad)
        floor_pad = np.pad(arr, 1, mode="constant", constant_values=info.min)
        ceil_pad = np.pad(arr, 1, mode="constant", constant_values=info.max)

        higher_neighbor = np.zeros((H, W), dtype=bool)
        lower_neighbor = np.zeros((H, W), dtype=bool)
        for dr, dc in NEIGHBOR_OFFSETS:
            rows = slice(1 + dr, H + 1 + dr)
            cols = slice(1 + dc, W + 1 + dc)
            higher_neighbor |= floor_pad[rows, cols] > arr
            lower_neighbor |= ceil_pad[rows, cols] < arr
        return ~higher_neighbor & lower_neighbor

    def boundary_mask(self) -> np.ndarray:
        mask = np.zeros(self.data.shape, dtype=bool)
        mask[0, :] = True
        mask[-1, :] = True
        mask[:, 0] = True
        mask[:, -1] = True
        return mask

    def eligible_indices(self, min_elevation: int = 0, descending: bool = False) -> np.ndarray:
        """
        Flat indices of cells with elevation >= min_elevation, sorted by elevation.

        The sort is stable, so equal elevations keep row-major order in both
        directions.
        """
        flat = self.data.astype(np.int32).ravel()
        candidates = np.flatnonzero(flat >= min_elevation)
        keys = flat[candidates]
        if descending:
            keys = -keys
        order = np.argsort(keys, kind="stable")
        return candidates[order]

    def iter_eligible_cells(self, min_elevation: int = 0, descending: bool = False) -> Iterator[Cell]:
        flat = self.data.ravel()
        for index in self.eligible_indices(min_elevation, descending):
            index = int(index)
            row, col = divmod(index, self.width)
            yield Cell(int(flat[index]), row, col, index)

    def eligible_cells(self, min_elevation: int = 0, descending: bool = False) -> List[Cell]:
        """Cells at or above min_elevation in processing order."""
        return list(self.iter_eligible_cells(min_elevation, descending))
