"""
Storage collaborator contract.

The engine never talks to a database directly. It calls the five
primitives of :class:`StorageBackend` and reads query results through a
:class:`QueryIterator`. Any backend that honors this module can sit behind
the engine.

Architecture:
    ::

        StorageBackend Protocol
        ┌────────────────────────────────────────────────────────────┐
        │ get(key)          → Entity          raises EntityNotFound   │
        │ put(key, row)     → complete Key    assigns leaf id         │
        │ delete(key)       → None            raises EntityNotFound   │
        │ count(query)      → int                                     │
        │ run_query(query)  → QueryIterator   raises CursorError      │
        └────────────────────────────────────────────────────────────┘

        QueryIterator
        ┌────────────────────────────────────────────────────────────┐
        │ next()    → Entity | None (None = done)                    │
        │             raises RowLoadError for one undecodable row,   │
        │             the iterator has still advanced past it        │
        │ cursor()  → opaque token, "" once nothing remains          │
        └────────────────────────────────────────────────────────────┘

Guardrails:
    - Iterators are stateful: consume them from one thread, in order
    - Query order is the backend's; the engine does not reorder rows
    - Cursors only resume queries of the identical shape

Tags:
    storage, protocol, query, cursor, burrow-core
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from burrow.core.keys import Key, format_path


class FilterOp(str, Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


@dataclass(frozen=True)
class FieldFilter:
    """``<name> <op> <value>`` applied to a stored field."""

    name: str
    op: FilterOp
    value: Any

    def matches(self, candidate: Any) -> bool:
        """Evaluate the filter against one field value (None never orders)."""
        if self.op is FilterOp.EQ:
            return candidate == self.value
        if self.op is FilterOp.NE:
            return candidate != self.value
        if candidate is None or self.value is None:
            return False
        try:
            if self.op is FilterOp.LT:
                return candidate < self.value
            if self.op is FilterOp.LE:
                return candidate <= self.value
            if self.op is FilterOp.GT:
                return candidate > self.value
            return candidate >= self.value
        except TypeError:
            return False


@dataclass(frozen=True)
class SortOrder:
    name: str
    descending: bool = False

    def __str__(self) -> str:
        return f"-{self.name}" if self.descending else self.name


@dataclass(frozen=True)
class Query:
    """Shape and window of one storage query.

    Scope fields combine with AND:
        ``parent``    direct children of this key
        ``ancestor``  every descendant of this key
        ``key``       exactly this key (existence checks)
        ``root_only`` only keys without a parent
    """

    kind: str
    parent: Key | None = None
    root_only: bool = False
    ancestor: Key | None = None
    key: Key | None = None
    filters: tuple[FieldFilter, ...] = ()
    orders: tuple[SortOrder, ...] = ()
    limit: int | None = None
    start_cursor: str | None = None
    keys_only: bool = False

    def shape(self) -> tuple[Any, ...]:
        """Everything but the window; cursors are bound to it."""
        return (
            self.kind,
            format_path(self.parent) if self.parent else "",
            self.root_only,
            format_path(self.ancestor) if self.ancestor else "",
            format_path(self.key) if self.key else "",
            tuple((f.name, f.op.value, repr(f.value)) for f in self.filters),
            tuple(str(o) for o in self.orders),
        )


@dataclass
class Entity:
    """One stored row."""

    key: Key
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


# =============================================================================
# EXCEPTIONS
# =============================================================================


class StorageBackendError(Exception):
    """Base for failures raised by storage backends."""


class EntityNotFound(StorageBackendError):
    def __init__(self, key: Key):
        self.key = key
        super().__init__(f"no entity stored at {format_path(key)}")


class CursorError(StorageBackendError):
    """The start cursor is malformed or belongs to another query shape."""


class RowLoadError(StorageBackendError):
    """One row could not be decoded; the iterator moved past it."""

    def __init__(self, key: Key, cause: BaseException):
        self.key = key
        self.cause = cause
        super().__init__(f"cannot decode row {format_path(key)}: {cause}")


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class QueryIterator(Protocol):
    def next(self) -> Entity | None:
        """Next row, or ``None`` when the page or the query is exhausted."""
        ...

    def cursor(self) -> str:
        """Token resuming right after the last row returned."""
        ...


@runtime_checkable
class StorageBackend(Protocol):
    """Hierarchical key-value store used by the engine."""

    def get(self, key: Key) -> Entity: ...

    def put(self, key: Key, row: dict[str, Any]) -> Key: ...

    def delete(self, key: Key) -> None: ...

    def count(self, query: Query) -> int: ...

    def run_query(self, query: Query) -> QueryIterator: ...

    def close(self) -> None: ...


__all__ = [
    "FilterOp",
    "FieldFilter",
    "SortOrder",
    "Query",
    "Entity",
    "StorageBackendError",
    "EntityNotFound",
    "CursorError",
    "RowLoadError",
    "QueryIterator",
    "StorageBackend",
]
