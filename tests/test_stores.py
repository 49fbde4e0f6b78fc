r"""
Tests for index_bench.stores registry and base class.
"""

import pytest

from index_bench.protocols import GraphStore
from index_bench.stores import BaseStore, DuckDBStore, MemoryStore, StoreRegistry


class TestStoreRegistry:
    def test_registry_has_stores(self):
        stores = StoreRegistry.list()
        assert "memory" in stores
        assert "duckdb" in stores

    def test_get_store_class(self):
        store_cls = StoreRegistry.get("duckdb")
        assert store_cls is DuckDBStore
        assert issubclass(store_cls, BaseStore)

    def test_get_unknown_store(self):
        assert StoreRegistry.get("unknown") is None

    def test_create_store(self):
        store = StoreRegistry.create("memory")
        assert isinstance(store, MemoryStore)

    def test_create_store_with_kwargs(self, tmp_path):
        store = StoreRegistry.create("duckdb", directory=tmp_path)
        assert isinstance(store, DuckDBStore)

    def test_create_store_unknown(self):
        with pytest.raises(ValueError, match="Unknown store"):
            StoreRegistry.create("unknown")


class TestBaseStore:
    def test_base_store_is_abstract(self):
        with pytest.raises(TypeError):
            BaseStore()  # type: ignore

    def test_stores_satisfy_protocol(self):
        assert isinstance(MemoryStore(), GraphStore)
        assert isinstance(DuckDBStore(), GraphStore)

    def test_store_names(self):
        assert MemoryStore().name == "Memory"
        assert DuckDBStore().name == "DuckDB"

    def test_closed_store_has_no_namespace(self):
        store = MemoryStore()
        assert store.namespace is None
        assert store.is_open is False
