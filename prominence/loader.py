"""
Reading DEM files into an ElevationGrid.

Two layouts are supported:
- binary: raw signed 16-bit samples, row-major, no header (little-endian by
  default). The shape is either given or guessed from the sample count.
- text: one comma-separated row of integer samples per line.

Negative samples (voids, bathymetry) are clamped to sea level on load.
OSError from the filesystem is not wrapped.
"""

import logging
import math
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from prominence.config import DEFAULT_DEM_SHAPE, DEFAULT_ENDIAN, KNOWN_DEM_SHAPES
from prominence.errors import (
    InvalidDimensionsError,
    InvalidElevationError,
    UnsupportedFormatError,
)
from prominence.grid import ElevationGrid

logger = logging.getLogger(__name__)

BINARY_SUFFIXES = (".bin", ".dem")
TEXT_SUFFIXES = (".csv", ".txt")

PathLike = Union[str, Path]


def detect_dimensions(total_cells: int) -> Tuple[int, int, bool]:
    """
    Guess (width, height) for a headerless DEM of `total_cells` samples.

    Known tile shapes are tried first, then an exact square. The third value
    is False when nothing matched and the default shape was returned.
    """
    for width, height in KNOWN_DEM_SHAPES:
        if width * height == total_cells:
            return width, height, True

    side = math.isqrt(total_cells)
    if side > 0 and side * side == total_cells:
        return side, side, True

    width, height = DEFAULT_DEM_SHAPE
    logger.warning(
        f"Cannot determine grid dimensions from file size: {total_cells * 2} bytes "
        f"({total_cells} cells), using default {width}x{height}"
    )
    return width, height, False


def load_binary(
    path: PathLike,
    width: Optional[int] = None,
    height: Optional[int] = None,
    endian: str = DEFAULT_ENDIAN,
) -> ElevationGrid:
    """
    Load a raw 16-bit DEM.

    Args:
        path: File of packed int16 samples.
        width, height: Grid shape. Give both or neither; when omitted the
            shape is detected from the file size.
        endian: '<' little-endian (default) or '>' big-endian.

    Raises:
        InvalidDimensionsError: Empty file, only one of width/height given,
            or fewer samples than width * height.
        OSError: File cannot be read.
    """
    path = Path(path)
    if (width is None) != (height is None):
        raise InvalidDimensionsError("width and height must be given together")
    if endian not in ("<", ">"):
        raise ValueError(f"endian must be '<' or '>', got {endian!r}")

    logger.info(f"Loading binary file: {path}")
    raw = path.read_bytes()
    usable = len(raw) - len(raw) % 2
    if usable != len(raw):
        logger.warning(f"{path} has an odd byte count, ignoring the trailing byte")
    data = np.frombuffer(raw[:usable], dtype=np.dtype(endian + "i2"))

    if data.size == 0:
        raise InvalidDimensionsError(f"{path} contains no elevation samples")

    if width is None:
        width, height, _ = detect_dimensions(data.size)
    else:
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(f"Invalid grid shape {width}x{height}")
        if data.size < width * height:
            raise InvalidDimensionsError(
                f"Expected {width * height} samples, got {data.size}. Check width/height."
            )

    n = width * height
    if data.size < n:
        logger.warning(f"File holds {data.size} of {n} samples, padding the rest with 0")
        data = np.concatenate([data, np.zeros(n - data.size, dtype=data.dtype)])
    elif data.size > n:
        logger.warning(f"File holds {data.size} samples, using the first {n}")
        data = data[:n]

    # Clamp negative values to 0 (sea level)
    elevations = np.clip(data.astype(np.int16).reshape(height, width), 0, None)
    logger.info(f"Grid loaded: {width} x {height} ({n} cells)")
    return ElevationGrid(elevations)


def load_csv(path: PathLike) -> ElevationGrid:
    """
    Load a comma-separated grid, one row per line. Blank lines are skipped.

    Raises:
        InvalidDimensionsError: No rows, or rows of different lengths.
        InvalidElevationError: A token is not an integer, or the file is not
            UTF-8 text.
    """
    path = Path(path)
    logger.info(f"Loading CSV file: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidElevationError(f"{path}: not a UTF-8 text grid") from e

    rows = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            row = [max(int(token), 0) for token in line.split(",")]
        except ValueError as e:
            raise InvalidElevationError(f"{path}:{lineno}: invalid number in CSV") from e
        if rows and len(row) != len(rows[0]):
            raise InvalidDimensionsError(
                f"{path}:{lineno}: inconsistent row length in CSV "
                f"({len(row)} values, expected {len(rows[0])})"
            )
        rows.append(row)

    if not rows:
        raise InvalidDimensionsError(f"Empty CSV grid: {path}")

    grid = ElevationGrid(rows)
    logger.info(f"Read CSV grid: rows={grid.height}, cols={grid.width}, total={grid.size}")
    return grid


def load_grid(
    path: PathLike,
    width: Optional[int] = None,
    height: Optional[int] = None,
    endian: str = DEFAULT_ENDIAN,
) -> ElevationGrid:
    """Load a DEM, picking the reader from the file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return load_csv(path)
    if suffix in BINARY_SUFFIXES:
        return load_binary(path, width=width, height=height, endian=endian)
    raise UnsupportedFormatError(
        f"Unsupported file extension {suffix or '(none)'!r}. "
        f"Use one of: {', '.join(TEXT_SUFFIXES + BINARY_SUFFIXES)}"
    )
