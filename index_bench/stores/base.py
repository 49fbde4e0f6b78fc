r"""
Base store implementation with common functionality.

    from index_bench.stores.base import BaseStore, StoreRegistry

    @StoreRegistry.register("mystore")
    class MyStore(BaseStore):
        def open(self, namespace: str) -> None:
            ...
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from index_bench.errors import StoreClosedError
from index_bench.types import Record

__all__ = ["BaseStore", "StoreRegistry"]


class StoreRegistry:
    """Registry for benchmark stores."""

    _stores: dict[str, type["BaseStore"]] = {}

    @classmethod
    def register(cls, name: str) -> Any:
        """Decorator to register a store class."""

        def decorator(store_cls: type["BaseStore"]) -> type["BaseStore"]:
            cls._stores[name] = store_cls
            return store_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type["BaseStore"] | None:
        """Get store class by name."""
        return cls._stores.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered store names."""
        return list(cls._stores.keys())

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "BaseStore":
        """Create store instance by name."""
        store_cls = cls.get(name)
        if store_cls is None:
            valid = ", ".join(cls.list()) or "none"
            msg = f"Unknown store '{name}'. Registered: {valid}"
            raise ValueError(msg)
        return store_cls(**kwargs)


class BaseStore(ABC):
    """Base class for benchmark stores.

    Subclasses implement the capability set the runner needs. The
    bulk-load hint defaults to a no-op for engines without one.
    """

    _namespace: str | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable store name."""
        ...

    @property
    def namespace(self) -> str | None:
        """Namespace the store is open on, None when closed."""
        return self._namespace

    @property
    def is_open(self) -> bool:
        return self._namespace is not None

    def _require_open(self) -> None:
        if self._namespace is None:
            msg = f"{self.name} store is not open"
            raise StoreClosedError(msg)

    @abstractmethod
    def open(self, namespace: str) -> None:
        """Open (creating if needed) the store for a namespace."""
        ...

    def declare_bulk_load(self) -> None:
        """Hint that a large sequential write follows.

        Default does nothing. Override where the engine has a
        write-path optimization to switch on.
        """
        self._require_open()

    @abstractmethod
    def has_vertex_type(self, vertex_type: str) -> bool:
        """Whether the vertex type exists."""
        ...

    @abstractmethod
    def _create_vertex_type(self, vertex_type: str) -> None:
        ...

    def create_vertex_type(self, vertex_type: str) -> bool:
        """Create a vertex type if missing.

        Returns:
            True if the type was created, False if it already existed.
        """
        self._require_open()
        if self.has_vertex_type(vertex_type):
            return False
        self._create_vertex_type(vertex_type)
        return True

    @abstractmethod
    def has_index(self, vertex_type: str, index_name: str) -> bool:
        """Whether the named index exists on the vertex type."""
        ...

    @abstractmethod
    def _create_unique_index(
        self,
        vertex_type: str,
        property_name: str,
        index_name: str,
        *,
        case_insensitive: bool,
    ) -> None:
        ...

    def ensure_unique_index(
        self,
        vertex_type: str,
        property_name: str,
        index_name: str,
        *,
        case_insensitive: bool = False,
    ) -> bool:
        """Create a mandatory unique index on a string property.

        The vertex type is created first if it does not exist. Both
        steps check for an existing definition, so calling this again
        with the same arguments changes nothing.

        Args:
            vertex_type: Vertex type to index.
            property_name: Property the index covers.
            index_name: Name of the index.
            case_insensitive: Compare values ignoring case.

        Returns:
            True if the index was created, False if it already existed.
        """
        self.create_vertex_type(vertex_type)
        if self.has_index(vertex_type, index_name):
            return False
        self._create_unique_index(
            vertex_type, property_name, index_name, case_insensitive=case_insensitive
        )
        return True

    @abstractmethod
    def insert_record(self, vertex_type: str, properties: Mapping[str, Any]) -> Record:
        """Insert a vertex carrying all its properties at creation time."""
        ...

    @abstractmethod
    def commit(self) -> None:
        """Flush buffered writes to durable storage."""
        ...

    @abstractmethod
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

    @abstractmethod
    def close(self) -> None:
        """Persist pending state and release the store."""
        ...

    @abstractmethod
    def count_records(self, vertex_type: str) -> int:
        """Count committed and pending records of a vertex type."""
        ...
