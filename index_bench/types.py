r"""
Core types for the index benchmark.

    from index_bench.types import WorkloadParameters, Phase

    workload = WorkloadParameters(vertex_count=1_000, iterations=2)
    print(workload.lookup_key)  # email500@example.com
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Any

from index_bench.keys import make_key

__all__ = [
    "Phase",
    "WorkloadParameters",
    "Record",
    "TrialResult",
    "AggregateResult",
    "RunResult",
    "running_totals",
]

NS_PER_MS = 1_000_000


class Phase(IntEnum):
    """Timed sub-step of a trial."""

    INDEX = auto()
    INSERT = auto()
    COMMIT = auto()
    QUERY = auto()


@dataclass(frozen=True, slots=True)
class WorkloadParameters:
    """Fixed configuration for a benchmark run.

    Attributes:
        vertex_count: Number of vertices inserted per trial.
        iterations: Number of trials.
        create_index: Build the unique index before inserting.
        vertex_class: Vertex type the records belong to.
        property_name: Indexed property carried by every record.
        key_prefix: Prefix of generated property values (defaults to property_name).
        key_suffix: Suffix of generated property values.
        lookup_index: Insert index whose key is looked up (defaults to vertex_count // 2).
        case_insensitive: Compare indexed values case-insensitively.
        namespace_prefix: Prefix of the per-trial store namespace.
        progress_interval: Print insert progress every this many records.
    """

    vertex_count: int = 1_000
    iterations: int = 5
    create_index: bool = False
    vertex_class: str = "user"
    property_name: str = "email"
    key_prefix: str | None = None
    key_suffix: str = "@example.com"
    lookup_index: int | None = None
    case_insensitive: bool = False
    namespace_prefix: str = "testdb"
    progress_interval: int = 10_000

    def __post_init__(self) -> None:
        if self.iterations < 1:
            msg = f"iterations must be >= 1, got {self.iterations}"
            raise ValueError(msg)
        if self.vertex_count < 0:
            msg = f"vertex_count must be >= 0, got {self.vertex_count}"
            raise ValueError(msg)
        if self.progress_interval < 1:
            msg = f"progress_interval must be >= 1, got {self.progress_interval}"
            raise ValueError(msg)
        if self.lookup_index is not None and self.lookup_index < 0:
            msg = f"lookup_index must be >= 0, got {self.lookup_index}"
            raise ValueError(msg)

    @property
    def prefix(self) -> str:
        """Effective key prefix."""
        return self.property_name if self.key_prefix is None else self.key_prefix

    @property
    def target_index(self) -> int:
        """Insert index of the record the query phase looks for."""
        if self.lookup_index is not None:
            return self.lookup_index
        return self.vertex_count // 2

    @property
    def lookup_key(self) -> str:
        return self.key_for(self.target_index)

    @property
    def index_name(self) -> str:
        return f"{self.vertex_class}.{self.property_name}.index"

    def key_for(self, j: int) -> str:
        """Property value carried by the j-th inserted record."""
        return make_key(j, prefix=self.prefix, suffix=self.key_suffix)

    def namespace(self, trial: int) -> str:
        """Store namespace used by the given trial."""
        return f"{self.namespace_prefix}{trial}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "vertex_count": self.vertex_count,
            "iterations": self.iterations,
            "create_index": self.create_index,
            "vertex_class": self.vertex_class,
            "property_name": self.property_name,
            "lookup_key": self.lookup_key,
            "case_insensitive": self.case_insensitive,
        }


@dataclass(frozen=True, slots=True)
class Record:
    """A stored vertex as returned by a store.

    Attributes:
        rid: Engine-assigned record identifier.
        vertex_type: Vertex type of the record.
        properties: Property values of the record.
    """

    rid: str
    vertex_type: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)


@dataclass(frozen=True, slots=True)
class TrialResult:
    """Timings of one trial.

    Attributes:
        trial: Trial index, starting at 1.
        namespace: Store namespace the trial ran against.
        index_ns: Index build duration (0 when no index was built).
        insert_ns: Insert phase duration.
        commit_ns: Commit phase duration.
        query_ns: Query phase duration.
        index_built: Whether the index phase ran.
        found: Record returned by the lookup, if any.
        store: Display name of the store the trial ran against.
    """

    trial: int
    namespace: str
    index_ns: int
    insert_ns: int
    commit_ns: int
    query_ns: int
    index_built: bool = False
    found: Record | None = None
    store: str = ""

    def duration_ns(self, phase: Phase) -> int:
        """Duration of a phase in nanoseconds."""
        return {
            Phase.INDEX: self.index_ns,
            Phase.INSERT: self.insert_ns,
            Phase.COMMIT: self.commit_ns,
            Phase.QUERY: self.query_ns,
        }[phase]

    def duration_ms(self, phase: Phase) -> float:
        """Duration of a phase in milliseconds."""
        return self.duration_ns(phase) / NS_PER_MS

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "trial": self.trial,
            "namespace": self.namespace,
            "store": self.store,
            "index_built": self.index_built,
        }
        for phase in Phase:
            data[f"{phase.name.lower()}_ms"] = self.duration_ms(phase)
        data["found"] = None
        if self.found is not None:
            data["found"] = {"rid": self.found.rid, "properties": dict(self.found.properties)}
        return data


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Per-phase duration sums over all trials.

    Attributes:
        iterations: Number of trials the sums cover.
        index_ns: Sum of index build durations.
        insert_ns: Sum of insert durations.
        commit_ns: Sum of commit durations.
        query_ns: Sum of query durations.
    """

    iterations: int
    index_ns: int = 0
    insert_ns: int = 0
    commit_ns: int = 0
    query_ns: int = 0

    @classmethod
    def from_trials(cls, trials: Iterable[TrialResult]) -> "AggregateResult":
        """Reduce trial results into their sums."""
        totals = cls(iterations=0)
        for trial in trials:
            totals = totals.add(trial)
        return totals

    def add(self, trial: TrialResult) -> "AggregateResult":
        """Return the sums with one more trial folded in."""
        return AggregateResult(
            iterations=self.iterations + 1,
            index_ns=self.index_ns + trial.index_ns,
            insert_ns=self.insert_ns + trial.insert_ns,
            commit_ns=self.commit_ns + trial.commit_ns,
            query_ns=self.query_ns + trial.query_ns,
        )

    def total_ns(self, phase: Phase) -> int:
        return {
            Phase.INDEX: self.index_ns,
            Phase.INSERT: self.insert_ns,
            Phase.COMMIT: self.commit_ns,
            Phase.QUERY: self.query_ns,
        }[phase]

    def average_ns(self, phase: Phase) -> float:
        """Sum of the phase divided by the iteration count."""
        if self.iterations == 0:
            return 0.0
        return self.total_ns(phase) / self.iterations

    def average_ms(self, phase: Phase) -> float:
        return self.average_ns(phase) / NS_PER_MS

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"iterations": self.iterations}
        for phase in Phase:
            data[f"{phase.name.lower()}_avg_ms"] = self.average_ms(phase)
        return data


def running_totals(trials: Iterable[TrialResult]) -> Iterator[AggregateResult]:
    """Yield the accumulated sums after each trial."""
    totals = AggregateResult(iterations=0)
    for trial in trials:
        totals = totals.add(trial)
        yield totals


@dataclass
class RunResult:
    """Results from a complete benchmark run.

    Attributes:
        workload: Parameters the run used.
        store: Name of the store the run targeted.
        trials: Per-trial results in execution order.
        aggregate: Sums reduced from the trials.
        started_at: UTC timestamp when the run started.
        completed_at: UTC timestamp when the run completed.
    """

    workload: WorkloadParameters
    store: str
    trials: list[TrialResult] = field(default_factory=list)
    aggregate: AggregateResult | None = None
    started_at: str = ""
    completed_at: str = ""

    @property
    def found_count(self) -> int:
        """Number of trials whose lookup found a record."""
        return sum(1 for t in self.trials if t.found is not None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "store": self.store,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "workload": self.workload.to_dict(),
            "trials": [t.to_dict() for t in self.trials],
            "averages": self.aggregate.to_dict() if self.aggregate else None,
        }
