"""Topographic prominence of DEM summits via an augmented union-find."""

from prominence.calculator import ProminenceCalculator, ProminenceSettings, calculate
from prominence.col_events import ColEventCalculator
from prominence.errors import (
    InvalidDimensionsError,
    InvalidElevationError,
    ProcessingError,
    ProminenceError,
    UnsupportedFormatError,
)
from prominence.grid import Cell, ElevationGrid
from prominence.loader import load_binary, load_csv, load_grid
from prominence.peak import Peak, format_peak_table, write_peaks_csv
from prominence.union_find import DrainageUnionFind

__version__ = "0.2.0"

__all__ = [
    "Cell",
    "ColEventCalculator",
    "DrainageUnionFind",
    "ElevationGrid",
    "InvalidDimensionsError",
    "InvalidElevationError",
    "Peak",
    "ProcessingError",
    "ProminenceCalculator",
    "ProminenceError",
    "ProminenceSettings",
    "UnsupportedFormatError",
    "calculate",
    "format_peak_table",
    "load_binary",
    "load_csv",
    "load_grid",
    "write_peaks_csv",
]
