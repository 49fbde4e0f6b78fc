r"""
Benchmark runner for the index workload.

Runs the fixed workload (optional unique index, bulk insert, commit,
point lookup) over a number of isolated trials, each against a fresh
store opened on its own namespace.

    from index_bench.runner import BenchmarkRunner
    from index_bench.stores import MemoryStore

    runner = BenchmarkRunner(workload, MemoryStore)
    result = runner.run()
"""

from collections.abc import Callable
from datetime import UTC, datetime

from index_bench.protocols import GraphStore
from index_bench.runner.timing import Stopwatch
from index_bench.types import NS_PER_MS, AggregateResult, Phase, Record, RunResult, TrialResult, WorkloadParameters

__all__ = ["BenchmarkRunner", "Echo", "StoreFactory", "format_ms"]

StoreFactory = Callable[[], GraphStore]
Echo = Callable[[str], None]

SUMMARY_LABELS: list[tuple[Phase, str]] = [
    (Phase.INSERT, "Insert"),
    (Phase.INDEX, "CreateIndex"),
    (Phase.COMMIT, "Commit"),
    (Phase.QUERY, "Query"),
]


def format_ms(ns: float) -> str:
    """Format nanoseconds as milliseconds with three decimals."""
    return f"{ns / NS_PER_MS:.3f}"


class BenchmarkRunner:
    """Drives the trials of one benchmark run.

    Args:
        workload: Parameters of the run.
        store_factory: Zero-argument callable returning an unopened store.
        echo: Receives every console line (defaults to print).
    """

    def __init__(
        self,
        workload: WorkloadParameters,
        store_factory: StoreFactory,
        *,
        echo: Echo = print,
    ) -> None:
        self._workload = workload
        self._store_factory = store_factory
        self._echo = echo

    @property
    def workload(self) -> WorkloadParameters:
        return self._workload

    def run(self) -> RunResult:
        """Run all trials and print the averaged results.

        Returns:
            RunResult with per-trial timings and the reduced sums.

        Raises:
            StoreError: If any trial fails; the run stops at that trial.
        """
        started_at = datetime.now(UTC).isoformat()
        self._echo("Start evaluation ...")

        trials = [self.run_trial(i) for i in range(1, self._workload.iterations + 1)]
        aggregate = AggregateResult.from_trials(trials)
        self._print_summary(aggregate)

        return RunResult(
            workload=self._workload,
            store=trials[0].store if trials else "",
            trials=trials,
            aggregate=aggregate,
            started_at=started_at,
            completed_at=datetime.now(UTC).isoformat(),
        )

    def run_trial(self, trial: int) -> TrialResult:
        """Run one trial against a fresh store on the trial's namespace."""
        w = self._workload
        namespace = w.namespace(trial)
        store = self._store_factory()
        store.open(namespace)

        try:
            store.declare_bulk_load()

            index_ns = 0
            if w.create_index:
                with Stopwatch() as sw:
                    store.ensure_unique_index(
                        w.vertex_class,
                        w.property_name,
                        w.index_name,
                        case_insensitive=w.case_insensitive,
                    )
                index_ns = sw.elapsed_ns
                self._echo(f"[{trial}] Created Index in {format_ms(index_ns)}ms")

            with Stopwatch() as sw:
                self._insert(store, trial)
            insert_ns = sw.elapsed_ns
            self._echo(f"[{trial}] Insert duration: {format_ms(insert_ns)}ms")

            with Stopwatch() as sw:
                store.commit()
            commit_ns = sw.elapsed_ns
            self._echo(f"[{trial}] Commit duration: {format_ms(commit_ns)}ms")

            with Stopwatch() as sw:
                matches = store.find_by_property(w.vertex_class, w.property_name, w.lookup_key, limit=1)
            query_ns = sw.elapsed_ns

            found: Record | None = matches[0] if matches else None
            if found is not None:
                value = found.get(w.property_name)
                self._echo(f"[{trial}] Found element: [{found.rid}] - Property={value}")
            self._echo(f"[{trial}] Query duration: {format_ms(query_ns)}ms")
        finally:
            store.close()

        return TrialResult(
            trial=trial,
            namespace=namespace,
            index_ns=index_ns,
            insert_ns=insert_ns,
            commit_ns=commit_ns,
            query_ns=query_ns,
            index_built=w.create_index,
            found=found,
            store=store.name,
        )

    def _insert(self, store: GraphStore, trial: int) -> None:
        w = self._workload
        for j in range(w.vertex_count):
            # indexed property must be present at creation time
            store.insert_record(w.vertex_class, {w.property_name: w.key_for(j)})
            if j % w.progress_interval == 0:
                percent = round(j / w.vertex_count * 100)
                self._echo(f"[{trial}] Inserting: {percent}%")

    def _print_summary(self, aggregate: AggregateResult) -> None:
        self._echo("")
        self._echo("Results:")
        for phase, label in SUMMARY_LABELS:
            self._echo(f"{label} duration: {format_ms(aggregate.average_ns(phase))}ms")
