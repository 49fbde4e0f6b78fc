r"""
Tests for index_bench.runner module.
"""

from functools import partial

import pytest

from index_bench.errors import ConstraintViolation, StoreOpenError
from index_bench.runner import BenchmarkRunner, Stopwatch, TimeUnit, format_ms
from index_bench.runner import timing
from index_bench.stores.memory import MemoryStore
from index_bench.types import AggregateResult, Phase, WorkloadParameters, running_totals


@pytest.fixture
def fake_clock(monkeypatch):
    """Replace the performance counter with a controllable value."""
    clock = {"now": 1_000}
    monkeypatch.setattr(timing.time, "perf_counter_ns", lambda: clock["now"])
    return clock


class TestTimeUnit:
    def test_conversions(self):
        assert TimeUnit.NANOSECONDS.from_ns(1_500) == 1_500
        assert TimeUnit.MICROSECONDS.from_ns(1_500) == 1
        assert TimeUnit.MILLISECONDS.from_ns(1_999_999) == 1
        assert TimeUnit.SECONDS.from_ns(2_000_000_000) == 2

    def test_truncates(self):
        assert TimeUnit.MILLISECONDS.from_ns(999_999) == 0


class TestStopwatch:
    def test_start_returns_running_stopwatch(self, fake_clock):
        sw = Stopwatch.start()
        fake_clock["now"] += 5_000_000
        assert sw.elapsed(TimeUnit.MILLISECONDS) == 5
        assert sw.elapsed(TimeUnit.NANOSECONDS) == 5_000_000

    def test_default_unit_is_milliseconds(self, fake_clock):
        sw = Stopwatch.start()
        fake_clock["now"] += 3_000_000
        assert sw.elapsed() == 3

    def test_elapsed_does_not_reset(self, fake_clock):
        sw = Stopwatch.start()
        fake_clock["now"] += 1_000_000
        first = sw.elapsed()
        fake_clock["now"] += 1_000_000
        second = sw.elapsed()

        assert first == 1
        assert second == 2

    def test_reset(self, fake_clock):
        sw = Stopwatch.start()
        fake_clock["now"] += 10_000_000
        assert sw.reset() is sw
        fake_clock["now"] += 1_000_000
        assert sw.elapsed() == 1

    def test_context_manager_freezes(self, fake_clock):
        with Stopwatch() as sw:
            fake_clock["now"] += 2_000
        fake_clock["now"] += 1_000_000
        assert sw.elapsed_ns == 2_000

    def test_real_clock_non_negative(self):
        sw = Stopwatch.start()
        sum(range(1000))
        assert sw.elapsed(TimeUnit.NANOSECONDS) >= 0


class TestFormatMs:
    def test_format(self):
        assert format_ms(1_234_567) == "1.235"
        assert format_ms(0) == "0.000"


class TestBenchmarkRunner:
    def _run(self, workload, catalog, echo_lines):
        runner = BenchmarkRunner(workload, partial(MemoryStore, catalog=catalog), echo=echo_lines.append)
        return runner.run()

    def test_runs_exactly_iterations_trials(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)

        assert len(result.trials) == tiny_workload.iterations
        assert [t.trial for t in result.trials] == [1, 2, 3]
        assert result.aggregate.iterations == 3

    def test_distinct_namespace_per_trial(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)

        namespaces = [t.namespace for t in result.trials]
        assert len(set(namespaces)) == len(namespaces)
        assert sorted(catalog) == ["testdb1", "testdb2", "testdb3"]
        for ns in catalog.values():
            assert ns.record_count == tiny_workload.vertex_count
            assert ns.committed == tiny_workload.vertex_count

    def test_fresh_store_per_trial(self, tiny_workload, echo_lines):
        created = []

        def factory():
            store = MemoryStore()
            created.append(store)
            return store

        BenchmarkRunner(tiny_workload, factory, echo=echo_lines.append).run()

        assert len(created) == 3
        assert len({id(s) for s in created}) == 3
        assert all(not s.is_open for s in created)

    def test_averages_are_sum_over_iterations(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)

        for phase in Phase:
            total = sum(t.duration_ns(phase) for t in result.trials)
            assert result.aggregate.total_ns(phase) == total
            assert result.aggregate.average_ns(phase) == total / tiny_workload.iterations
        assert result.aggregate == AggregateResult.from_trials(result.trials)

    def test_running_sums_non_decreasing(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)

        previous = AggregateResult(iterations=0)
        for totals in running_totals(result.trials):
            for phase in Phase:
                assert totals.total_ns(phase) >= 0
                assert totals.total_ns(phase) >= previous.total_ns(phase)
            previous = totals

    def test_no_index_phase_when_disabled(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)

        assert result.aggregate.index_ns == 0
        assert all(not t.index_built for t in result.trials)
        assert not any("Created Index" in line for line in echo_lines)
        assert "CreateIndex duration: 0.000ms" in echo_lines
        assert all(not ns.types["user"].indexes for ns in catalog.values())

    def test_index_phase_when_enabled(self, catalog, echo_lines):
        workload = WorkloadParameters(vertex_count=20, iterations=2, create_index=True)
        result = self._run(workload, catalog, echo_lines)

        assert all(t.index_built for t in result.trials)
        assert len([line for line in echo_lines if "Created Index in" in line]) == 2
        for ns in catalog.values():
            assert list(ns.types["user"].indexes) == ["user.email.index"]
        assert all(t.found is not None for t in result.trials)

    def test_progress_lines(self, catalog, echo_lines):
        workload = WorkloadParameters(vertex_count=25, iterations=1, progress_interval=10)
        self._run(workload, catalog, echo_lines)

        progress = [line for line in echo_lines if "Inserting" in line]
        assert progress == ["[1] Inserting: 0%", "[1] Inserting: 40%", "[1] Inserting: 80%"]

    def test_output_order(self, catalog, echo_lines):
        workload = WorkloadParameters(vertex_count=4, iterations=1, create_index=True, lookup_index=2)
        self._run(workload, catalog, echo_lines)

        assert echo_lines[0] == "Start evaluation ..."
        assert echo_lines[1].startswith("[1] Created Index in ")
        assert echo_lines[2] == "[1] Inserting: 0%"
        assert echo_lines[3].startswith("[1] Insert duration: ")
        assert echo_lines[4].startswith("[1] Commit duration: ")
        assert echo_lines[5] == "[1] Found element: [#9:2] - Property=email2@example.com"
        assert echo_lines[6].startswith("[1] Query duration: ")
        assert echo_lines[7:9] == ["", "Results:"]
        labels = [line.split(" duration:")[0] for line in echo_lines[9:]]
        assert labels == ["Insert", "CreateIndex", "Commit", "Query"]
        assert all(line.endswith("ms") for line in echo_lines[9:])

    def test_end_to_end_lookup(self, catalog, echo_lines):
        workload = WorkloadParameters(
            vertex_count=1_000,
            iterations=2,
            create_index=False,
            property_name="email",
            lookup_index=544,
        )
        assert workload.lookup_key == "email544@example.com"

        result = self._run(workload, catalog, echo_lines)

        found_lines = [line for line in echo_lines if "Found element" in line]
        assert found_lines == [
            "[1] Found element: [#9:544] - Property=email544@example.com",
            "[2] Found element: [#9:544] - Property=email544@example.com",
        ]
        for trial in result.trials:
            assert trial.found is not None
            assert trial.found.get("email") == "email544@example.com"

        summary = echo_lines[echo_lines.index("Results:") + 1 :]
        assert len(summary) == 4
        for line in summary:
            value = float(line.split(": ")[1].removesuffix("ms"))
            assert value >= 0
        assert "CreateIndex duration: 0.000ms" in summary

    def test_zero_vertices(self, catalog, echo_lines):
        workload = WorkloadParameters(vertex_count=0, iterations=1)
        result = self._run(workload, catalog, echo_lines)

        assert not any("Inserting" in line for line in echo_lines)
        assert not any("Found element" in line for line in echo_lines)
        assert result.trials[0].found is None
        assert result.found_count == 0

    def test_lookup_miss_is_not_an_error(self, catalog, echo_lines):
        workload = WorkloadParameters(vertex_count=10, iterations=1, lookup_index=500)
        result = self._run(workload, catalog, echo_lines)

        assert result.trials[0].found is None
        assert any(line.startswith("[1] Query duration: ") for line in echo_lines)

    def test_store_name_recorded(self, tiny_workload, catalog, echo_lines):
        result = self._run(tiny_workload, catalog, echo_lines)
        assert result.store == "Memory"
        assert [trial.store for trial in result.trials] == ["Memory"] * 3
        assert result.started_at <= result.completed_at

    def test_bulk_load_declared(self, echo_lines):
        hints = []

        class RecordingStore(MemoryStore):
            def declare_bulk_load(self) -> None:
                super().declare_bulk_load()
                hints.append(self.namespace)

        workload = WorkloadParameters(vertex_count=1, iterations=2)
        BenchmarkRunner(workload, RecordingStore, echo=echo_lines.append).run()
        assert hints == ["testdb1", "testdb2"]

    def test_failure_releases_store_and_aborts(self, echo_lines):
        created = []

        class FailingStore(MemoryStore):
            def insert_record(self, vertex_type, properties):
                if self.count_records(vertex_type) == 3:
                    raise ConstraintViolation("duplicate key")
                return super().insert_record(vertex_type, properties)

        def factory():
            store = FailingStore()
            created.append(store)
            return store

        workload = WorkloadParameters(vertex_count=10, iterations=3)
        with pytest.raises(ConstraintViolation):
            BenchmarkRunner(workload, factory, echo=echo_lines.append).run()

        assert len(created) == 1
        assert not created[0].is_open
        assert "Results:" not in echo_lines

    def test_open_failure_is_fatal(self, echo_lines):
        class BrokenStore(MemoryStore):
            def open(self, namespace: str) -> None:
                raise StoreOpenError(f"cannot open {namespace}")

        workload = WorkloadParameters(vertex_count=1, iterations=2)
        with pytest.raises(StoreOpenError, match="testdb1"):
            BenchmarkRunner(workload, BrokenStore, echo=echo_lines.append).run()
