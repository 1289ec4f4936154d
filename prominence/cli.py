"""Command line: load a DEM, compute prominence, print the peak table."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from prominence.calculator import COL_EVENTS, METHODS, UNION_FIND, ProminenceSettings, calculate
from prominence.config import (
    DEFAULT_DEM_FILE,
    DEFAULT_ENDIAN,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MIN_ELEVATION,
    DEFAULT_MIN_PROMINENCE,
    DEFAULT_TOP,
)
from prominence.errors import ProminenceError
from prominence.grid import ElevationGrid
from prominence.loader import load_grid
from prominence.peak import format_peak_table, write_peaks_csv
from prominence.progress import TqdmProgress, log_progress

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="prominence",
        description="Compute topographic prominence for every summit of a DEM tile.",
    )
    ap.add_argument("dem_file", type=str, nargs="?", default=DEFAULT_DEM_FILE,
                    help=f"Binary (.bin/.dem) or CSV (.csv/.txt) DEM (default: {DEFAULT_DEM_FILE})")
    ap.add_argument("--width", type=int, default=None,
                    help="Grid width of a binary DEM (detected from file size if omitted)")
    ap.add_argument("--height", type=int, default=None,
                    help="Grid height of a binary DEM (detected from file size if omitted)")
    ap.add_argument("--endian", choices=["<", ">"], default=DEFAULT_ENDIAN,
                    help="Byte order: '<' little-endian, '>' big-endian (default: <)")
    ap.add_argument("--min-elevation", type=int, default=DEFAULT_MIN_ELEVATION,
                    help="Ignore cells below this elevation (default: %(default)s)")
    ap.add_argument("--min-prominence", type=int, default=DEFAULT_MIN_PROMINENCE,
                    help="Drop peaks less prominent than this (default: %(default)s)")
    ap.add_argument("--top", type=non_negative_int, default=DEFAULT_TOP,
                    help="Number of peaks to print, 0 for all (default: %(default)s)")
    ap.add_argument("--method", choices=METHODS, default=UNION_FIND,
                    help="union-find: one peak per connected region (default); "
                         "col-events: a peak for every summit at the col where it meets higher ground")
    ap.add_argument("--ascending", action="store_true",
                    help="Process cells from lowest to highest (union-find method only)")
    ap.add_argument("--inspect", action="store_true",
                    help="Print the grid shape and a few samples, then exit.")
    ap.add_argument("--output", type=Path, default=None,
                    help="Also write every peak to this CSV file.")
    ap.add_argument("--progress", action="store_true",
                    help="Show a progress bar while processing cells.")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    return ap


def configure_logging(verbose: bool = False, quiet: bool = False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, DEFAULT_LOG_LEVEL)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def describe_grid(grid: ElevationGrid) -> str:
    """Shape, first row values and the middle sample of a grid."""
    mid_row, mid_col = grid.height // 2, grid.width // 2
    first_row = grid.data[0, :10].tolist()
    return "\n".join([
        f"DEM shape: {grid.shape} (rows, cols)",
        f"First row values: {first_row}",
        f"Middle value at (row={mid_row}, col={mid_col}): {grid.elevation(mid_row, mid_col)}",
    ])


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    dem_path = Path(args.dem_file)
    if not dem_path.exists():
        logger.error(f"File '{dem_path}' does not exist")
        return 1
    if args.ascending and args.method == COL_EVENTS:
        logger.warning("--ascending only applies to the union-find method, ignoring it")

    try:
        grid = load_grid(dem_path, width=args.width, height=args.height, endian=args.endian)

        if args.inspect:
            print(describe_grid(grid))
            return 0

        settings = ProminenceSettings(
            min_elevation=args.min_elevation,
            min_prominence=args.min_prominence,
            descending=not args.ascending,
        )
        observer = TqdmProgress() if args.progress else log_progress
        try:
            peaks = calculate(grid, settings, method=args.method, observer=observer)
        finally:
            if isinstance(observer, TqdmProgress):
                observer.close()

        print(format_peak_table(peaks, limit=args.top or None))

        if args.output is not None:
            write_peaks_csv(peaks, args.output)
    except (ProminenceError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
