"""Peak records and their text/CSV presentation."""

import csv
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

logger = logging.getLogger(__name__)

TABLE_TITLE = "Peaks by prominence:"
TABLE_HEADER = "  prom    row    col   elev   crow   ccol  celev"
TABLE_RULE = "-" * 50
CSV_COLUMNS = ["prominence", "row", "col", "elevation", "saddle_row", "saddle_col", "saddle_elevation"]


@dataclass(frozen=True)
class Peak:
    """
    A summit and the prominence computed for it.

    The saddle fields are None when prominence is measured against sea level
    (the summit's basin reaches the grid edge) instead of an interior col.
    """

    row: int
    col: int
    elevation: int
    prominence: int = 0
    saddle_row: Optional[int] = None
    saddle_col: Optional[int] = None
    saddle_elevation: Optional[int] = None

    @property
    def has_saddle(self) -> bool:
        return self.saddle_elevation is not None

    def with_prominence(self, prominence: int) -> "Peak":
        return replace(self, prominence=prominence)

    def with_saddle(self, row: int, col: int, elevation: int) -> "Peak":
        return replace(self, saddle_row=row, saddle_col=col, saddle_elevation=elevation)

    def __str__(self):
        if self.has_saddle:
            saddle = f"{self.saddle_row:6d} {self.saddle_col:6d} {self.saddle_elevation:6d}"
        else:
            saddle = f"{'NA':>6} {'NA':>6} {'NA':>6}"
        return f"{self.prominence:6d} {self.row:6d} {self.col:6d} {self.elevation:6d} {saddle}"


def format_peak_table(peaks: Sequence[Peak], limit: Optional[int] = None) -> str:
    """Render peaks as the fixed-width prominence table (first `limit` rows if given)."""
    shown = peaks if limit is None else peaks[:limit]
    lines = [TABLE_TITLE, TABLE_HEADER, TABLE_RULE]
    lines.extend(str(peak) for peak in shown)
    return "\n".join(lines)


def write_peaks_csv(peaks: Iterable[Peak], path: Union[str, Path]) -> Path:
    """Write peaks to CSV. Missing saddle fields are left empty."""
    path = Path(path)
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_COLUMNS)
        for peak in peaks:
            writer.writerow([
                peak.prominence,
                peak.row,
                peak.col,
                peak.elevation,
                "" if peak.saddle_row is None else peak.saddle_row,
                "" if peak.saddle_col is None else peak.saddle_col,
                "" if peak.saddle_elevation is None else peak.saddle_elevation,
            ])
            count += 1
    logger.info(f"Wrote {count} peaks to {path}")
    return path
