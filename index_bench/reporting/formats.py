r"""
Export formats for run results.

    from index_bench.reporting.formats import JsonExporter

    exporter = JsonExporter()
    exporter.export(result, "results.json")
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

from index_bench.types import Phase, RunResult

__all__ = ["BaseExporter", "JsonExporter", "CsvExporter", "session_id"]

_CSV_PHASES = [Phase.INDEX, Phase.INSERT, Phase.COMMIT, Phase.QUERY]


def session_id(result: RunResult) -> str:
    """Session identifier derived from the run's start time."""
    if not result.started_at:
        return "bench"
    started = datetime.fromisoformat(result.started_at)
    return f"bench_{started.strftime('%Y%m%d_%H%M%S')}"


class BaseExporter(ABC):
    """Base class for result exporters."""

    suffix: str = ""

    def export(self, result: RunResult, path: str | Path) -> None:
        """Export results to file."""
        Path(path).write_text(self.to_string(result))

    @abstractmethod
    def to_string(self, result: RunResult) -> str:
        """Export results to string."""
        ...


class JsonExporter(BaseExporter):
    """Export results to JSON format."""

    suffix = ".json"

    def __init__(self, *, indent: int = 2) -> None:
        self._indent = indent

    def to_string(self, result: RunResult) -> str:
        data: dict[str, Any] = {"session": {"id": session_id(result)}, **result.to_dict()}
        return json.dumps(data, indent=self._indent)


class CsvExporter(BaseExporter):
    """Export results to CSV format, one row per trial plus the averages."""

    suffix = ".csv"

    def to_string(self, result: RunResult) -> str:
        header = ["session_id", "store", "trial", "namespace"]
        header += [f"{p.name.lower()}_ms" for p in _CSV_PHASES]
        header.append("found")
        lines = [",".join(header)]

        sid = session_id(result)
        for trial in result.trials:
            row = [sid, result.store, str(trial.trial), trial.namespace]
            row += [f"{trial.duration_ms(p):.3f}" for p in _CSV_PHASES]
            row.append("true" if trial.found is not None else "false")
            lines.append(",".join(row))

        if result.aggregate is not None:
            row = [sid, result.store, "avg", ""]
            row += [f"{result.aggregate.average_ms(p):.3f}" for p in _CSV_PHASES]
            row.append(str(result.found_count))
            lines.append(",".join(row))

        return "\n".join(lines)
