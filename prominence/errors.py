"""Error kinds raised while loading a DEM or computing prominence."""


class ProminenceError(Exception):
    """Base class for every error raised by this package."""


class InvalidDimensionsError(ProminenceError, ValueError):
    """Grid is empty, ragged, or its shape disagrees with the sample count."""


class InvalidElevationError(ProminenceError, ValueError):
    """A sample cannot be stored as a signed 16-bit elevation."""


class ProcessingError(ProminenceError, RuntimeError):
    """Internal invariant broken during the calculation (a bug, not bad input)."""


class UnsupportedFormatError(ProminenceError, ValueError):
    """Input file extension is not one we know how to read."""
