r"""
Result reporting.

Exports a run's per-trial timings and averages to JSON and CSV.

    from index_bench.reporting import JsonExporter

    JsonExporter().export(result, "results.json")
"""

from index_bench.reporting.formats import BaseExporter, CsvExporter, JsonExporter, session_id

__all__ = [
    "BaseExporter",
    "CsvExporter",
    "JsonExporter",
    "session_id",
]
