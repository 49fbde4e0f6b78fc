r"""
Stores for index-bench.

Each store implements the GraphStore capability set so the
runner can drive any engine the same way.

    from index_bench.stores import StoreRegistry

    store = StoreRegistry.create("duckdb", directory="./data")
    store.open("testdb1")
"""

from index_bench.stores.base import BaseStore, StoreRegistry
from index_bench.stores.duckdb import DuckDBStore
from index_bench.stores.memory import MemoryNamespace, MemoryStore

__all__ = [
    "BaseStore",
    "DuckDBStore",
    "MemoryNamespace",
    "MemoryStore",
    "StoreRegistry",
]
