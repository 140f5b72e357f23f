"""SQLite storage backend.

Uses the built-in sqlite3 module. Suitable for:
- Development and single-process deployments
- Tests that need a real file-backed store

Rows live in one ``entities`` table keyed by the formatted path. Field
filters and sort orders are evaluated with ``json_extract`` over the stored
JSON; the ancestor scope is a path-prefix match. Ids for incomplete keys
come from a per-kind ``sequences`` table.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

from burrow.core.keys import Key, format_path, parse_path
from burrow.core.logging import get_logger
from burrow.storage.base import (
    Entity,
    EntityNotFound,
    FilterOp,
    Query,
    RowLoadError,
    StorageBackendError,
)
from burrow.storage.cursor import decode_cursor, encode_cursor

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entities (
    path        TEXT PRIMARY KEY,
    kind        TEXT NOT NULL,
    id          INTEGER NOT NULL,
    parent      TEXT NOT NULL DEFAULT '',
    data        TEXT NOT NULL,
    created_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_entities_kind_parent ON entities (kind, parent);
CREATE TABLE IF NOT EXISTS sequences (
    kind     TEXT PRIMARY KEY,
    next_id  INTEGER NOT NULL
);
"""

_OPERATORS = {
    FilterOp.EQ: "IS",
    FilterOp.NE: "IS NOT",
    FilterOp.LT: "<",
    FilterOp.LE: "<=",
    FilterOp.GT: ">",
    FilterOp.GE: ">=",
}


def _json_path(name: str) -> str:
    return '$."' + name.replace('"', '""') + '"'


def _where(query: Query) -> tuple[str, list[Any]]:
    clauses = ["kind = ?"]
    params: list[Any] = [query.kind]
    if query.key is not None:
        clauses.append("path = ?")
        params.append(format_path(query.key))
    if query.parent is not None:
        clauses.append("parent = ?")
        params.append(format_path(query.parent))
    if query.root_only:
        clauses.append("parent = ''")
    if query.ancestor is not None:
        prefix = format_path(query.ancestor) + "/"
        clauses.append("substr(path, 1, ?) = ?")
        params.extend([len(prefix), prefix])
    for flt in query.filters:
        clauses.append(f"json_extract(data, ?) {_OPERATORS[flt.op]} ?")
        params.extend([_json_path(flt.name), flt.value])
    return " AND ".join(clauses), params


def _order_by(query: Query) -> tuple[str, list[Any]]:
    terms = []
    params: list[Any] = []
    for order in query.orders:
        direction = "DESC NULLS FIRST" if order.descending else "ASC NULLS LAST"
        terms.append(f"json_extract(data, ?) {direction}")
        params.append(_json_path(order.name))
    terms.append("rowid ASC")
    return ", ".join(terms), params


def _parse_created_at(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteQueryIterator:
    """Iterator over one fetched window (one extra row tells if more remain)."""

    def __init__(self, query: Query, rows: list[sqlite3.Row], offset: int):
        self._query = query
        self._rows = rows
        self._offset = offset
        self._consumed = 0

    def next(self) -> Entity | None:
        if self._query.limit is not None and self._consumed >= self._query.limit:
            return None
        if self._consumed >= len(self._rows):
            return None
        row = self._rows[self._consumed]
        self._consumed += 1
        key = parse_path(row["path"])
        try:
            data = json.loads(row["data"])
        except ValueError as e:
            raise RowLoadError(key, e) from e
        if not isinstance(data, dict):
            raise RowLoadError(key, TypeError(f"stored row is {type(data).__name__}, not an object"))
        return Entity(key=key, data=data, created_at=_parse_created_at(row["created_at"]))

    def cursor(self) -> str:
        if self._consumed >= len(self._rows):
            return ""
        return encode_cursor(self._query, self._offset + self._consumed)

    def __iter__(self) -> Iterator[Entity]:
        while (entity := self.next()) is not None:
            yield entity


class SQLiteStorage:
    """
    SQLite-backed :class:`~burrow.storage.base.StorageBackend`.

    ``path`` is a filename or ``":memory:"``. One connection is shared by
    all threads and serialized with a lock.
    """

    def __init__(self, path: str = ":memory:", *, timeout: float = 5.0):
        self._path = path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(path, timeout=timeout, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StorageBackendError(f"Failed to open SQLite database {path!r}: {e}") from e
        logger.debug("sqlite_storage_opened", path=path)

    @property
    def path(self) -> str:
        return self._path

    def _assign_id(self, key: Key) -> Key:
        row = self._conn.execute("SELECT next_id FROM sequences WHERE kind = ?", (key.kind,)).fetchone()
        next_id = row["next_id"] if row else 1
        while True:
            candidate = key.with_id(next_id)
            next_id += 1
            taken = self._conn.execute("SELECT 1 FROM entities WHERE path = ?", (format_path(candidate),)).fetchone()
            if not taken:
                break
        self._conn.execute(
            "INSERT INTO sequences (kind, next_id) VALUES (?, ?) "
            "ON CONFLICT(kind) DO UPDATE SET next_id = excluded.next_id",
            (key.kind, next_id),
        )
        return candidate

    def get(self, key: Key) -> Entity:
        with self._lock:
            row = self._conn.execute(
                "SELECT data, created_at FROM entities WHERE path = ?",
                (format_path(key),),
            ).fetchone()
        if row is None:
            raise EntityNotFound(key)
        try:
            data = json.loads(row["data"])
        except ValueError as e:
            raise RowLoadError(key, e) from e
        return Entity(key=key, data=data, created_at=_parse_created_at(row["created_at"]))

    def put(self, key: Key, row: dict[str, Any]) -> Key:
        data = json.dumps(row)
        with self._lock, self._conn:
            if key.id is None:
                key = self._assign_id(key)
            parent = key.parent
            self._conn.execute(
                "INSERT INTO entities (path, kind, id, parent, data, created_at) VALUES (?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(path) DO UPDATE SET data = excluded.data",
                (
                    format_path(key),
                    key.kind,
                    key.id,
                    format_path(parent) if parent else "",
                    data,
                    datetime.now(UTC).isoformat(),
                ),
            )
        return key

    def delete(self, key: Key) -> None:
        with self._lock, self._conn:
            cursor = self._conn.execute("DELETE FROM entities WHERE path = ?", (format_path(key),))
        if cursor.rowcount == 0:
            raise EntityNotFound(key)

    def count(self, query: Query) -> int:
        where, params = _where(query)
        with self._lock:
            row = self._conn.execute(f"SELECT COUNT(*) AS n FROM entities WHERE {where}", params).fetchone()
        return int(row["n"])

    def run_query(self, query: Query) -> SQLiteQueryIterator:
        offset = decode_cursor(query, query.start_cursor) if query.start_cursor else 0
        where, params = _where(query)
        order_by, order_params = _order_by(query)
        # -1 means no limit in SQLite.
        window = query.limit + 1 if query.limit is not None else -1
        sql = f"SELECT path, data, created_at FROM entities WHERE {where} ORDER BY {order_by} LIMIT ? OFFSET ?"
        with self._lock:
            rows = self._conn.execute(sql, [*params, *order_params, window, offset]).fetchall()
        return SQLiteQueryIterator(query, rows, offset)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.debug("sqlite_storage_closed", path=self._path)


__all__ = ["SQLiteStorage", "SQLiteQueryIterator"]
