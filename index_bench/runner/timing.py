r"""
Timing utilities for benchmark phases.

    from index_bench.runner.timing import Stopwatch, TimeUnit

    sw = Stopwatch.start()
    do_something()
    print(f"Elapsed: {sw.elapsed(TimeUnit.MILLISECONDS)}ms")
"""

import time
from enum import Enum
from typing import Any

__all__ = ["Stopwatch", "TimeUnit"]


class TimeUnit(Enum):
    """Granularity for reading a stopwatch, valued in nanoseconds per unit."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000

    def from_ns(self, ns: int) -> int:
        """Convert nanoseconds to whole units, truncating."""
        return ns // self.value


class Stopwatch:
    """Elapsed-time measurer on the monotonic performance counter.

    Reading the stopwatch never moves its reference instant, so it can
    be sampled any number of times. Used as a context manager, the
    elapsed time is frozen when the block exits.

        with Stopwatch() as sw:
            do_something()
        print(f"Elapsed: {sw.elapsed_ns}ns")
    """

    def __init__(self) -> None:
        self._start: int = time.perf_counter_ns()
        self._end: int | None = None

    @classmethod
    def start(cls) -> "Stopwatch":
        """Create a stopwatch running from now."""
        return cls()

    def reset(self) -> "Stopwatch":
        """Start a new measurement window from now."""
        self._start = time.perf_counter_ns()
        self._end = None
        return self

    def __enter__(self) -> "Stopwatch":
        return self.reset()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._end = time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time in nanoseconds."""
        end = self._end if self._end is not None else time.perf_counter_ns()
        return end - self._start

    def elapsed(self, unit: TimeUnit = TimeUnit.MILLISECONDS) -> int:
        """Elapsed time in whole units of the requested granularity."""
        return unit.from_ns(self.elapsed_ns)
