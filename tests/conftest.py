r"""
Shared pytest fixtures for index-bench tests.
"""

import os

import pytest

from index_bench.config import ENV_PREFIX
from index_bench.stores.memory import MemoryNamespace, MemoryStore
from index_bench.types import WorkloadParameters


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep INDEX_BENCH_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture
def tiny_workload() -> WorkloadParameters:
    """Tiny workload for fast unit tests."""
    return WorkloadParameters(vertex_count=50, iterations=3, progress_interval=20)


@pytest.fixture
def catalog() -> dict[str, MemoryNamespace]:
    """Namespace catalog shared by memory stores of one test."""
    return {}


@pytest.fixture
def memory_store(catalog):
    """Memory store open on a test namespace."""
    store = MemoryStore(catalog=catalog)
    store.open("testdb")
    yield store
    store.close()


@pytest.fixture
def echo_lines() -> list[str]:
    """Collects the lines a runner prints."""
    return []
