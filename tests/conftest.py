"""Pytest configuration and shared grids for prominence tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from prominence.grid import ElevationGrid


@pytest.fixture
def pattern_rows():
    """5x5 sea-level tile with a 3x3 massif around a single summit of 5."""
    return [
        [0, 0, 0, 0, 0],
        [0, 2, 1, 2, 0],
        [0, 1, 5, 1, 0],
        [0, 2, 1, 2, 0],
        [0, 0, 0, 0, 0],
    ]


@pytest.fixture
def pattern_grid(pattern_rows):
    return ElevationGrid(pattern_rows)


@pytest.fixture
def enclosed_grid():
    """Summit of 9 on a plateau of 3, ringed by zeros."""
    return ElevationGrid(np.array([
        [0, 0, 0, 0, 0],
        [0, 3, 3, 3, 0],
        [0, 3, 9, 3, 0],
        [0, 3, 3, 3, 0],
        [0, 0, 0, 0, 0],
    ]))


@pytest.fixture
def ridge_grid():
    """Three summits (5, 2, 8) along row 1, joined by cols of elevation 1."""
    return ElevationGrid(np.array([
        [0, 0, 0, 0, 0, 0, 0],
        [0, 5, 1, 2, 1, 8, 0],
        [0, 0, 0, 0, 0, 0, 0],
    ]))


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file under tmp_path and return its path."""
    def _write(rows, name="grid.csv"):
        path = tmp_path / name
        path.write_text("\n".join(",".join(str(v) for v in row) for row in rows) + "\n")
        return path
    return _write


@pytest.fixture
def write_bin(tmp_path):
    """Write samples as raw int16 to a file under tmp_path and return its path."""
    def _write(values, name="grid.bin", endian="<"):
        path = tmp_path / name
        np.asarray(values, dtype=np.dtype(endian + "i2")).tofile(path)
        return path
    return _write
