"""Storage primitives as seen by the engine.

Each call checks the Resource deadline first, then maps whatever the
backend raises onto the error kind of the primitive being attempted:

    get        → StorageReadError   (not_found when the entity is missing)
    put        → StorageWriteError
    delete     → StorageDeleteError (not_found when the entity is missing)
    count      → StorageCountError
    run_query  → InvalidCursorError for a bad cursor, else StorageReadError
    next_row   → StorageReadError; RowLoadError passes through untouched
"""

from __future__ import annotations

from typing import Any

from burrow.core.deadline import Deadline
from burrow.core.errors import (
    ErrorStatus,
    InvalidCursorError,
    StorageCountError,
    StorageDeleteError,
    StorageReadError,
    StorageWriteError,
)
from burrow.core.keys import Key
from burrow.storage.base import (
    CursorError,
    Entity,
    EntityNotFound,
    Query,
    QueryIterator,
    RowLoadError,
    StorageBackend,
)


def _check(deadline: Deadline | None, op: str) -> None:
    if deadline is not None:
        deadline.check(op)


class StorageGateway:
    """Deadline-aware, error-mapping wrapper around a :class:`StorageBackend`."""

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    def get(self, key: Key, deadline: Deadline | None = None) -> Entity:
        try:
            _check(deadline, "get")
            return self.storage.get(key)
        except EntityNotFound as e:
            raise StorageReadError(f"Could not get {key} from storage", cause=e) from e
        except Exception as e:
            raise StorageReadError(status=ErrorStatus.INTERNAL, cause=e) from e

    def put(self, key: Key, row: dict[str, Any], deadline: Deadline | None = None) -> Key:
        try:
            _check(deadline, "put")
            return self.storage.put(key, row)
        except Exception as e:
            raise StorageWriteError(cause=e) from e

    def delete(self, key: Key, deadline: Deadline | None = None) -> None:
        try:
            _check(deadline, "delete")
            self.storage.delete(key)
        except EntityNotFound as e:
            raise StorageDeleteError(status=ErrorStatus.NOT_FOUND, cause=e) from e
        except Exception as e:
            raise StorageDeleteError(cause=e) from e

    def count(self, query: Query, deadline: Deadline | None = None) -> int:
        try:
            _check(deadline, "count")
            return self.storage.count(query)
        except Exception as e:
            raise StorageCountError(cause=e) from e

    def run_query(self, query: Query, deadline: Deadline | None = None) -> QueryIterator:
        try:
            _check(deadline, "query")
            return self.storage.run_query(query)
        except CursorError as e:
            raise InvalidCursorError(cause=e) from e
        except Exception as e:
            raise StorageReadError(status=ErrorStatus.INTERNAL, cause=e) from e

    def next_row(self, iterator: QueryIterator, deadline: Deadline | None = None) -> Entity | None:
        try:
            _check(deadline, "next")
            return iterator.next()
        except RowLoadError:
            raise
        except Exception as e:
            raise StorageReadError(status=ErrorStatus.INTERNAL, cause=e) from e


__all__ = ["StorageGateway"]
