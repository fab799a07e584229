"""
Execution timing utilities.

Provides wall-clock timing for whole runs, named sections and repeated
laps of the same operation. Backends run synchronously on the calling
thread, so no device synchronization is needed around measurements.
"""

import statistics
import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating timer with named sections and repeated laps.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('allocate'):
            A = BLASMatrix.randn(256, 256)

        for _ in range(5):
            with timer.lap():
                B = A * A

        timer.stop()
        timer.result()
        # {'total_seconds': 0.05, 'allocate': 0.001, 'best_lap': 0.008, ...}
    """

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._laps: list[float] = []
        self._start_time: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        """Start the overall timer."""
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the overall timer."""
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section.

        Args:
            name: Section identifier (used as key in result dict)

        Note:
            A section entered more than once accumulates.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    @contextmanager
    def lap(self) -> Iterator[None]:
        """Time one repetition of the measured operation."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._laps.append(time.perf_counter() - start)

    @property
    def laps(self) -> tuple[float, ...]:
        return tuple(self._laps)

    def best(self) -> float:
        """Fastest lap in seconds."""
        if not self._laps:
            raise RuntimeError("Timer.best() called with no laps recorded")
        return min(self._laps)

    def median(self) -> float:
        """Median lap in seconds."""
        if not self._laps:
            raise RuntimeError("Timer.median() called with no laps recorded")
        return statistics.median(self._laps)

    def result(self) -> dict[str, float]:
        """
        Get timing results.

        Returns:
            Dictionary with 'total_seconds', every section, and lap
            statistics when laps were recorded

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        if self._laps:
            result['best_lap'] = self.best()
            result['median_lap'] = self.median()
        return result


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Context manager for simple timing.

    Usage:
        with timed() as timer:
            C = A * B
        print(f"Took {timer.result()['total_seconds']:.3f}s")
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
