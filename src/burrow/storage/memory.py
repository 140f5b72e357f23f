"""In-memory storage backend.

Process-local store for development and tests. Rows are kept as JSON
round-tripped copies so callers never share mutable state with the store.
Default query order is insertion order; sort directives are applied as a
stable multi-key sort on top of it.
"""

from __future__ import annotations

import itertools
import json
import threading
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

from burrow.core.keys import Key
from burrow.storage.base import Entity, EntityNotFound, FieldFilter, Query, SortOrder
from burrow.storage.cursor import decode_cursor, encode_cursor


def _copy_row(row: dict[str, Any]) -> dict[str, Any]:
    return json.loads(json.dumps(row))


def _sort_value(value: Any) -> tuple[int, Any]:
    # Numbers before strings before everything else; missing values last.
    if value is None:
        return (3, 0)
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, json.dumps(value, sort_keys=True))


def _matches(entity: Entity, query: Query) -> bool:
    key = entity.key
    if key.kind != query.kind:
        return False
    if query.key is not None and key != query.key:
        return False
    if query.parent is not None and key.parent != query.parent:
        return False
    if query.root_only and key.parent is not None:
        return False
    if query.ancestor is not None and not query.ancestor.is_ancestor_of(key):
        return False
    return all(_filter_matches(f, entity.data) for f in query.filters)


def _filter_matches(flt: FieldFilter, data: dict[str, Any]) -> bool:
    return flt.matches(data.get(flt.name))


def _ordered(entities: list[Entity], orders: tuple[SortOrder, ...]) -> list[Entity]:
    result = list(entities)
    for order in reversed(orders):
        result.sort(key=lambda e, n=order.name: _sort_value(e.data.get(n)), reverse=order.descending)
    return result


class MemoryQueryIterator:
    """Iterator over a materialized, already-filtered result list."""

    def __init__(self, query: Query, rows: list[Entity], offset: int):
        self._query = query
        self._rows = rows
        self._position = offset
        self._remaining = query.limit

    def next(self) -> Entity | None:
        if self._remaining is not None and self._remaining <= 0:
            return None
        if self._position >= len(self._rows):
            return None
        entity = self._rows[self._position]
        self._position += 1
        if self._remaining is not None:
            self._remaining -= 1
        return Entity(key=entity.key, data=_copy_row(entity.data), created_at=entity.created_at)

    def cursor(self) -> str:
        if self._position >= len(self._rows):
            return ""
        return encode_cursor(self._query, self._position)

    def __iter__(self) -> Iterator[Entity]:
        while (entity := self.next()) is not None:
            yield entity


class MemoryStorage:
    """Thread-safe dict store keyed by :class:`Key`."""

    def __init__(self) -> None:
        self._entities: dict[Key, Entity] = {}
        self._sequences: dict[str, Iterator[int]] = {}
        self._lock = threading.Lock()

    def _next_id(self, kind: str) -> int:
        sequence = self._sequences.setdefault(kind, itertools.count(1))
        return next(sequence)

    def get(self, key: Key) -> Entity:
        with self._lock:
            entity = self._entities.get(key)
        if entity is None:
            raise EntityNotFound(key)
        return Entity(key=entity.key, data=_copy_row(entity.data), created_at=entity.created_at)

    def put(self, key: Key, row: dict[str, Any]) -> Key:
        data = _copy_row(row)
        with self._lock:
            if key.id is None:
                candidate = key.with_id(self._next_id(key.kind))
                while candidate in self._entities:
                    candidate = key.with_id(self._next_id(key.kind))
                key = candidate
            previous = self._entities.get(key)
            created_at = previous.created_at if previous else datetime.now(UTC)
            # Overwrites keep their original insertion position.
            self._entities[key] = Entity(key=key, data=data, created_at=created_at)
        return key

    def delete(self, key: Key) -> None:
        with self._lock:
            if key not in self._entities:
                raise EntityNotFound(key)
            del self._entities[key]

    def count(self, query: Query) -> int:
        with self._lock:
            return sum(1 for entity in self._entities.values() if _matches(entity, query))

    def run_query(self, query: Query) -> MemoryQueryIterator:
        offset = decode_cursor(query, query.start_cursor) if query.start_cursor else 0
        with self._lock:
            rows = [entity for entity in self._entities.values() if _matches(entity, query)]
        return MemoryQueryIterator(query, _ordered(rows, query.orders), offset)

    def close(self) -> None:
        with self._lock:
            self._entities.clear()
            self._sequences.clear()

    def __len__(self) -> int:
        return len(self._entities)


__all__ = ["MemoryStorage", "MemoryQueryIterator"]
