r"""
Protocol definition for benchmark stores.

The runner only talks to a store through this capability set, so any
engine that implements it can be benchmarked.

    from index_bench.protocols import GraphStore

    class MyStore(GraphStore):
        ...
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from index_bench.types import Record

__all__ = ["GraphStore"]


@runtime_checkable
class GraphStore(Protocol):
    """Protocol for embedded graph stores under benchmark."""

    @property
    def name(self) -> str:
        """Human-readable store name."""
        ...

    @property
    def namespace(self) -> str | None:
        """Namespace the store is currently open on."""
        ...

    def open(self, namespace: str) -> None:
        """Open (creating if needed) the store for a namespace."""
        ...

    def declare_bulk_load(self) -> None:
        """Hint that a large sequential write follows."""
        ...

    def create_vertex_type(self, vertex_type: str) -> bool:
        """Create a vertex type if missing, True if it was created."""
        ...

    def ensure_unique_index(
        self,
        vertex_type: str,
        property_name: str,
        index_name: str,
        *,
        case_insensitive: bool = False,
    ) -> bool:
        """Create a mandatory unique index if missing, True if it was created."""
        ...

    def insert_record(self, vertex_type: str, properties: Mapping[str, Any]) -> Record:
        """Insert a vertex carrying all its properties at creation time."""
        ...

    def commit(self) -> None:
        """Flush buffered writes to durable storage."""
        ...

    def find_by_property(
        self,
        vertex_type: str,
        property_name: str,
        value: Any,
        *,
        limit: int = 1,
    ) -> list[Record]:
        """Exact-match lookup on a property."""
        ...

    def close(self) -> None:
        """Persist pending state and release the store."""
        ...
