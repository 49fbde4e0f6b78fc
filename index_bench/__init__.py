r"""
index-bench: unique-index insert and lookup benchmark for embedded graph stores.

Times index creation, bulk vertex insert, commit and a point lookup
over repeated isolated trials and reports the averages.

    from index_bench import BenchmarkRunner, build_workload
    from index_bench.stores import DuckDBStore

    workload = build_workload("smoke", create_index=True)
    result = BenchmarkRunner(workload, DuckDBStore).run()
"""

from index_bench.config import DEFAULT_PRESET, PRESETS, build_workload, get_preset
from index_bench.runner import BenchmarkRunner, Stopwatch, TimeUnit
from index_bench.types import AggregateResult, Phase, Record, RunResult, TrialResult, WorkloadParameters

__all__ = [
    "AggregateResult",
    "BenchmarkRunner",
    "DEFAULT_PRESET",
    "PRESETS",
    "Phase",
    "Record",
    "RunResult",
    "Stopwatch",
    "TimeUnit",
    "TrialResult",
    "WorkloadParameters",
    "build_workload",
    "get_preset",
]

__version__ = "0.1.0"
