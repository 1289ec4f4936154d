"""Defaults for the prominence calculator and its command line."""

# File read when no path is given on the command line
DEFAULT_DEM_FILE = "W100N40.bin"

DEFAULT_MIN_ELEVATION = 0
DEFAULT_MIN_PROMINENCE = 1

# Rows printed by the CLI (0 prints everything)
DEFAULT_TOP = 100

# '<' little-endian, '>' big-endian
DEFAULT_ENDIAN = "<"

# Cells between two "walking" progress events
PROGRESS_INTERVAL = 1_000_000

# Common DEM tile shapes as (width, height), tried in this order
KNOWN_DEM_SHAPES = (
    (4800, 6000),  # SRTM 1 arc-second, rows x cols = 6000 x 4800
    (6000, 4800),  # same tile transposed
    (1200, 1200),  # SRTM 3 arc-second
    (3601, 3601),  # SRTM 1 arc-second .hgt
    (1201, 1201),  # SRTM 3 arc-second .hgt
)
DEFAULT_DEM_SHAPE = (6000, 4800)

DEFAULT_LOG_LEVEL = "INFO"
