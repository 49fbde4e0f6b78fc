r"""
DuckDB embedded store.

Each namespace is its own DuckDB database: a file
``<directory>/<namespace>.duckdb`` when a directory is configured,
otherwise an in-memory database. Vertex types are tables keyed by a
``rid`` column numbered per type; properties become columns on first use.

Requires: pip install duckdb

Environment variables:
    INDEX_BENCH_DUCKDB_DIR: Database directory (default: in-memory)

    from index_bench.stores.duckdb import DuckDBStore

    store = DuckDBStore(directory="./data")
    store.open("testdb1")  # ./data/testdb1.duckdb
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import duckdb

from index_bench.config import get_env
from index_bench.errors import (
    ConstraintViolation,
    SchemaConflictError,
    StoreError,
    StoreOpenError,
)
from index_bench.stores.base import BaseStore, StoreRegistry
from index_bench.types import Record

__all__ = ["DuckDBStore"]

MEMORY = ":memory:"

_SQL_TYPES: list[tuple[type, str]] = [
    (bool, "BOOLEAN"),
    (int, "BIGINT"),
    (float, "DOUBLE"),
]


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _sql_type(value: Any) -> str:
    for py_type, sql_type in _SQL_TYPES:
        if isinstance(value, py_type):
            return sql_type
    return "VARCHAR"


@StoreRegistry.register("duckdb")
class DuckDBStore(BaseStore):
    """DuckDB embedded store, one database per namespace."""

    def __init__(self, *, directory: str | Path | None = None) -> None:
        if directory is None:
            directory = get_env("DUCKDB_DIR")
        self._directory = Path(directory) if directory else None
        self._conn: Any = None
        self._namespace: str | None = None
        self._path: str | None = None
        self._in_transaction = False
        self._columns: dict[str, list[str]] = {}
        self._next_rid: dict[str, int] = {}
        self._insert_sql: dict[tuple[str, tuple[str, ...]], str] = {}
        self._case_insensitive: set[tuple[str, str]] = set()
        self._case_insensitive_at_begin: frozenset[tuple[str, str]] = frozenset()

    @property
    def name(self) -> str:
        return "DuckDB"

    @property
    def version(self) -> str:
        return duckdb.__version__

    @property
    def path(self) -> str | None:
        """Database path of the open namespace."""
        return self._path

    def open(self, namespace: str) -> None:
        if not namespace:
            raise StoreOpenError("Namespace must not be empty")
        if self._conn is not None:
            msg = f"Store already open on '{self._namespace}'"
            raise StoreOpenError(msg)

        if self._directory is None:
            path = MEMORY
        else:
            try:
                self._directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Cannot create database directory {self._directory}: {e}"
                raise StoreOpenError(msg) from e
            path = str(self._directory / f"{namespace}.duckdb")

        try:
            self._conn = duckdb.connect(path)
        except duckdb.Error as e:
            msg = f"Cannot open DuckDB database {path}: {e}"
            raise StoreOpenError(msg) from e

        self._path = path
        self._namespace = namespace

    def declare_bulk_load(self) -> None:
        self._require_open()
        self._conn.execute("SET preserve_insertion_order = false")

    def has_vertex_type(self, vertex_type: str) -> bool:
        self._require_open()
        row = self._conn.execute(
            "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = ?",
            [vertex_type],
        ).fetchone()
        return bool(row and row[0])

    def _create_vertex_type(self, vertex_type: str) -> None:
        try:
            self._conn.execute(f"CREATE TABLE {_quote(vertex_type)} (rid BIGINT NOT NULL)")
        except duckdb.Error as e:
            msg = f"Cannot create vertex type '{vertex_type}': {e}"
            raise SchemaConflictError(msg) from e
        self._columns[vertex_type] = ["rid"]
        self._next_rid[vertex_type] = 0

    def _load_columns(self, vertex_type: str) -> list[str]:
        if vertex_type not in self._columns:
            rows = self._conn.execute(
                "SELECT column_name FROM information_schema.columns "
                "WHERE table_name = ? ORDER BY ordinal_position",
                [vertex_type],
            ).fetchall()
            self._columns[vertex_type] = [row[0] for row in rows]
        return self._columns[vertex_type]

    def _add_column(self, vertex_type: str, column: str, sql_type: str) -> None:
        try:
            self._conn.execute(
                f"ALTER TABLE {_quote(vertex_type)} ADD COLUMN {_quote(column)} {sql_type}"
            )
        except duckdb.Error as e:
            msg = f"Cannot add property '{column}' to '{vertex_type}': {e}"
            raise SchemaConflictError(msg) from e
        self._columns[vertex_type].append(column)
        self._insert_sql = {k: v for k, v in self._insert_sql.items() if k[0] != vertex_type}

    def has_index(self, vertex_type: str, index_name: str) -> bool:
        self._require_open()
        row = self._conn.execute(
            "SELECT COUNT(*) FROM duckdb_indexes() WHERE table_name = ? AND index_name = ?",
            [vertex_type, index_name],
        ).fetchone()
        return bool(row and row[0])

    def _create_unique_index(
        self,
        vertex_type: str,
        property_name: str,
        index_name: str,
        *,
        case_insensitive: bool,
    ) -> None:
        table = _quote(vertex_type)
        column = _quote(property_name)
        if property_name not in self._load_columns(vertex_type):
            self._add_column(vertex_type, property_name, "VARCHAR")

        key = f"lower({column})" if case_insensitive else column
        try:
            # mandatory: values must be present when the record is created
            self._conn.execute(f"ALTER TABLE {table} ALTER COLUMN {column} SET NOT NULL")
            self._conn.execute(f"CREATE UNIQUE INDEX {_quote(index_name)} ON {table} ({key})")
        except duckdb.Error as e:
            msg = f"Cannot create index '{index_name}' on {vertex_type}.{property_name}: {e}"
            raise SchemaConflictError(msg) from e

        if case_insensitive:
            self._case_insensitive.add((vertex_type, property_name))

    def _begin(self) -> None:
        if not self._in_transaction:
            self._conn.begin()
            self._case_insensitive_at_begin = frozenset(self._case_insensitive)
            self._in_transaction = True

    def insert_record(self, vertex_type: str, properties: Mapping[str, Any]) -> Record:
        self._require_open()
        columns = self._load_columns(vertex_type)
        if not columns:
            self._create_vertex_type(vertex_type)
            columns = self._columns[vertex_type]

        for prop, value in properties.items():
            if prop not in columns:
                self._add_column(vertex_type, prop, _sql_type(value))

        names = tuple(properties)
        sql = self._insert_sql.get((vertex_type, names))
        if sql is None:
            cols = ", ".join(_quote(n) for n in ("rid", *names))
            marks = ", ".join("?" for _ in range(len(names) + 1))
            sql = f"INSERT INTO {_quote(vertex_type)} ({cols}) VALUES ({marks})"
            self._insert_sql[(vertex_type, names)] = sql

        rid = self._rid_for(vertex_type)
        self._begin()
        try:
            self._conn.execute(sql, [rid, *properties.values()])
        except duckdb.ConstraintException as e:
            self._rollback()
            raise ConstraintViolation(str(e)) from e
        except duckdb.Error as e:
            self._rollback()
            msg = f"Insert into '{vertex_type}' failed: {e}"
            raise StoreError(msg) from e

        self._next_rid[vertex_type] = rid + 1
        return Record(rid=f"#{vertex_type}:{rid}", vertex_type=vertex_type, properties=dict(properties))

    def _rid_for(self, vertex_type: str) -> int:
        if vertex_type not in self._next_rid:
            row = self._conn.execute(
                f"SELECT COALESCE(MAX(rid) + 1, 0) FROM {_quote(vertex_type)}"
            ).fetchone()
            self._next_rid[vertex_type] = row[0] if row else 0
        return self._next_rid[vertex_type]

    def _rollback(self) -> None:
        # a failed statement aborts the whole DuckDB transaction
        if self._in_transaction:
            self._in_transaction = False
            self._conn.rollback()
            self._next_rid.clear()
            self._columns.clear()
            self._insert_sql.clear()
            self._case_insensitive = set(self._case_insensitive_at_begin)

    def commit(self) -> None:
        self._require_open()
        if not self._in_transaction:
            return
        self._in_transaction = False
        try:
            self._conn.commit()
        except duckdb.ConstraintException as e:
            raise ConstraintViolation(str(e)) from e
        except duckdb.Error as e:
            msg = f"Commit failed: {e}"
            raise StoreError(msg) from e

    def find_by_property(
        self,
        vertex_type: str,
        property_name: str,
        value: Any,
        *,
        limit: int = 1,
    ) -> list[Record]:
        self._require_open()
        if property_name not in self._load_columns(vertex_type):
            return []

        column = _quote(property_name)
        if (vertex_type, property_name) in self._case_insensitive:
            where = f"lower({column}) = lower(?)"
        else:
            where = f"{column} = ?"

        result = self._conn.execute(
            f"SELECT * FROM {_quote(vertex_type)} WHERE {where} LIMIT {int(limit)}",
            [value],
        )
        columns = [desc[0] for desc in result.description]
        records = []
        for row in result.fetchall():
            data = dict(zip(columns, row, strict=True))
            rid = data.pop("rid")
            props = {k: v for k, v in data.items() if v is not None}
            records.append(Record(rid=f"#{vertex_type}:{rid}", vertex_type=vertex_type, properties=props))
        return records

    def count_records(self, vertex_type: str) -> int:
        self._require_open()
        if not self._load_columns(vertex_type):
            return 0
        row = self._conn.execute(f"SELECT COUNT(*) FROM {_quote(vertex_type)}").fetchone()
        return row[0] if row else 0

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self.commit()
            if self._path != MEMORY:
                self._conn.execute("CHECKPOINT")
        except duckdb.Error as e:
            msg = f"Closing DuckDB database {self._path} failed: {e}"
            raise StoreError(msg) from e
        finally:
            self._conn.close()
            self._conn = None
            self._namespace = None
            self._path = None
            self._in_transaction = False
            self._next_rid.clear()
            self._columns.clear()
            self._insert_sql.clear()
            self._case_insensitive.clear()
