"""
Progress events emitted by the calculators, and observers that consume them.

Calculators never print. They hand a ProgressEvent to whatever callable they
were given; log_progress is the default, TqdmProgress draws a progress bar
for the cell walk.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)

STARTED = "started"
INITIALIZED = "initialized"
WALKING = "walking"
WALKED = "walked"
COLLECTED = "collected"
FINISHED = "finished"


@dataclass(frozen=True)
class ProgressEvent:
    stage: str
    message: str
    current: int = 0
    total: int = 0
    elapsed: float = 0.0

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.current / self.total


Observer = Callable[[ProgressEvent], None]


def log_progress(event: ProgressEvent):
    logger.info(event.message)


def silent(event: ProgressEvent):
    pass


class TqdmProgress:
    """Draws the walk stage as a tqdm bar and logs every other stage."""

    def __init__(self, desc: str = "Processing cells", **tqdm_kwargs):
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self.bar: Optional[tqdm] = None

    def __call__(self, event: ProgressEvent):
        if event.stage != WALKING:
            self.close()
            logger.info(event.message)
            return

        if self.bar is None:
            self.bar = tqdm(total=event.total, desc=self.desc, unit="cell", **self.tqdm_kwargs)
        self.bar.update(event.current - self.bar.n)

    def close(self):
        if self.bar is not None:
            self.bar.close()
            self.bar = None


class ProgressReporter:
    """Base for calculators: owns the observer and the run clock."""

    def __init__(self, observer: Optional[Observer] = None):
        self.observer = observer or log_progress
        self._start = time.perf_counter()

    def start_clock(self):
        self._start = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._start

    def emit(self, stage: str, message: str, current: int = 0, total: int = 0):
        self.observer(ProgressEvent(stage, message, current, total, self.elapsed))
