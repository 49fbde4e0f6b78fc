r"""
Benchmark runner and timing.

Drives the isolated trials of a run and times each phase.

    from index_bench.runner import BenchmarkRunner

    runner = BenchmarkRunner(workload, store_factory)
    result = runner.run()
"""

from index_bench.runner.runner import BenchmarkRunner, Echo, StoreFactory, format_ms
from index_bench.runner.timing import Stopwatch, TimeUnit

__all__ = [
    "BenchmarkRunner",
    "Echo",
    "Stopwatch",
    "StoreFactory",
    "TimeUnit",
    "format_ms",
]
