"""Performance timing utilities for artymap."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from ..core.logger import log


class Stopwatch:
    """Measure elapsed wall time of one operation."""

    def __init__(self) -> None:
        self.start_time = time.perf_counter()
        self.end_time: float | None = None

    def stop(self) -> float:
        """Stop the watch and return the elapsed milliseconds."""
        self.end_time = time.perf_counter()
        return self.elapsed_ms

    @property
    def elapsed_ms(self) -> float:
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000.0


@contextmanager
def timed(operation: str) -> Iterator[Stopwatch]:
    """Log the duration of the wrapped block under *operation*."""
    watch = Stopwatch()
    try:
        yield watch
    finally:
        log.log_performance(operation, watch.stop())
