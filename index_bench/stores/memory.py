r"""
In-process dictionary store.

A reference engine with no external dependencies. Each namespace lives
in a catalog dict; pass a shared catalog to several stores to have them
see each other's namespaces, the way separate connections to the same
on-disk database would.

    from index_bench.stores.memory import MemoryStore

    store = MemoryStore()
    store.open("testdb1")
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from index_bench.errors import (
    ConstraintViolation,
    SchemaConflictError,
    StoreClosedError,
    StoreOpenError,
)
from index_bench.stores.base import BaseStore, StoreRegistry
from index_bench.types import Record

__all__ = ["MemoryStore", "MemoryNamespace"]


@dataclass
class _UniqueIndex:
    property_name: str
    case_insensitive: bool
    entries: dict[Any, int] = field(default_factory=dict)

    def key(self, value: Any) -> Any:
        if self.case_insensitive and isinstance(value, str):
            return value.casefold()
        return value


@dataclass
class _VertexType:
    cluster_id: int
    records: list[dict[str, Any]] = field(default_factory=list)
    indexes: dict[str, _UniqueIndex] = field(default_factory=dict)


@dataclass
class MemoryNamespace:
    """State of one namespace.

    Attributes:
        types: Vertex types by name.
        committed: Number of records made durable by commit.
    """

    types: dict[str, _VertexType] = field(default_factory=dict)
    committed: int = 0

    @property
    def record_count(self) -> int:
        return sum(len(t.records) for t in self.types.values())


@StoreRegistry.register("memory")
class MemoryStore(BaseStore):
    """Dictionary-backed store living in the Python process."""

    def __init__(self, *, catalog: dict[str, MemoryNamespace] | None = None) -> None:
        self._catalog = catalog if catalog is not None else {}
        self._namespace: str | None = None
        self._data: MemoryNamespace | None = None
        self._bulk_load = False

    @property
    def name(self) -> str:
        return "Memory"

    @property
    def bulk_load(self) -> bool:
        """Whether the bulk-load hint was declared."""
        return self._bulk_load

    @property
    def data(self) -> MemoryNamespace:
        if self._data is None:
            msg = f"{self.name} store is not open"
            raise StoreClosedError(msg)
        return self._data

    def open(self, namespace: str) -> None:
        if not namespace:
            raise StoreOpenError("Namespace must not be empty")
        if self._namespace is not None:
            msg = f"Store already open on '{self._namespace}'"
            raise StoreOpenError(msg)
        self._data = self._catalog.setdefault(namespace, MemoryNamespace())
        self._namespace = namespace

    def declare_bulk_load(self) -> None:
        self._require_open()
        self._bulk_load = True

    def has_vertex_type(self, vertex_type: str) -> bool:
        return vertex_type in self.data.types

    def _create_vertex_type(self, vertex_type: str) -> None:
        self.data.types[vertex_type] = _VertexType(cluster_id=len(self.data.types) + 9)

    def has_index(self, vertex_type: str, index_name: str) -> bool:
        vtype = self.data.types.get(vertex_type)
        return vtype is not None and index_name in vtype.indexes

    def _create_unique_index(
        self,
        vertex_type: str,
        property_name: str,
        index_name: str,
        *,
        case_insensitive: bool,
    ) -> None:
        vtype = self.data.types[vertex_type]
        for other_name, other in vtype.indexes.items():
            if other.property_name == property_name:
                msg = f"Property '{property_name}' already indexed by '{other_name}'"
                raise SchemaConflictError(msg)

        index = _UniqueIndex(property_name=property_name, case_insensitive=case_insensitive)
        for position, props in enumerate(vtype.records):
            value = props.get(property_name)
            if value is None:
                msg = f"Existing record #{vtype.cluster_id}:{position} has no '{property_name}'"
                raise SchemaConflictError(msg)
            key = index.key(value)
            if key in index.entries:
                msg = f"Duplicate value '{value}' prevents index '{index_name}'"
                raise SchemaConflictError(msg)
            index.entries[key] = position
        vtype.indexes[index_name] = index

    def insert_record(self, vertex_type: str, properties: Mapping[str, Any]) -> Record:
        self._require_open()
        if not self.has_vertex_type(vertex_type):
            self._create_vertex_type(vertex_type)
        vtype = self.data.types[vertex_type]
        position = len(vtype.records)

        keys: list[tuple[_UniqueIndex, Any]] = []
        for index_name, index in vtype.indexes.items():
            value = properties.get(index.property_name)
            if value is None:
                msg = f"Property '{index.property_name}' is mandatory for index '{index_name}'"
                raise ConstraintViolation(msg)
            key = index.key(value)
            if key in index.entries:
                msg = f"Duplicate key '{value}' in index '{index_name}'"
                raise ConstraintViolation(msg)
            keys.append((index, key))

        for index, key in keys:
            index.entries[key] = position
        props = dict(properties)
        vtype.records.append(props)
        return Record(rid=f"#{vtype.cluster_id}:{position}", vertex_type=vertex_type, properties=props)

    def commit(self) -> None:
        self.data.committed = self.data.record_count

    def find_by_property(
        self,
        vertex_type: str,
        property_name: str,
        value: Any,
        *,
        limit: int = 1,
    ) -> list[Record]:
        vtype = self.data.types.get(vertex_type)
        if vtype is None:
            return []

        for index in vtype.indexes.values():
            if index.property_name == property_name:
                position = index.entries.get(index.key(value))
                if position is None:
                    return []
                return [self._record(vertex_type, vtype, position)][:limit]

        matches = []
        for position, props in enumerate(vtype.records):
            if props.get(property_name) == value:
                matches.append(self._record(vertex_type, vtype, position))
                if len(matches) >= limit:
                    break
        return matches

    def _record(self, vertex_type: str, vtype: _VertexType, position: int) -> Record:
        return Record(
            rid=f"#{vtype.cluster_id}:{position}",
            vertex_type=vertex_type,
            properties=dict(vtype.records[position]),
        )

    def count_records(self, vertex_type: str) -> int:
        vtype = self.data.types.get(vertex_type)
        return len(vtype.records) if vtype else 0

    def close(self) -> None:
        if self._data is not None:
            self.commit()
        self._data = None
        self._namespace = None
        self._bulk_load = False
