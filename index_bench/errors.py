r"""
Store errors raised by index-bench.

Every store translates its engine's exceptions into this hierarchy,
so the runner and the CLI only deal with StoreError.
"""

__all__ = [
    "StoreError",
    "StoreOpenError",
    "StoreClosedError",
    "SchemaConflictError",
    "ConstraintViolation",
]


class StoreError(Exception):
    """Base class for store failures."""


class StoreOpenError(StoreError):
    """The store could not be opened or created."""


class StoreClosedError(StoreError):
    """Operation attempted on a store that is not open."""


class SchemaConflictError(StoreError):
    """The engine rejected a vertex type or index definition."""


class ConstraintViolation(StoreError):
    """A record broke a mandatory or unique property constraint."""
