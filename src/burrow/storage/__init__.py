"""
burrow.storage: storage collaborator contract and reference backends.

``create_storage(url)`` picks a backend from ``BurrowSettings.storage_url``:

    memory://              MemoryStorage
    sqlite://              SQLiteStorage on ":memory:"
    sqlite:///path/to.db   SQLiteStorage on a file
"""

from __future__ import annotations

from burrow.core.errors import ConfigError
from burrow.storage.base import (
    CursorError,
    Entity,
    EntityNotFound,
    FieldFilter,
    FilterOp,
    Query,
    QueryIterator,
    RowLoadError,
    SortOrder,
    StorageBackend,
    StorageBackendError,
)
from burrow.storage.memory import MemoryStorage
from burrow.storage.sqlite import SQLiteStorage


def create_storage(url: str) -> StorageBackend:
    """Build a storage backend from a URL."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ConfigError(f"storage url {url!r} has no scheme")
    if scheme == "memory":
        return MemoryStorage()
    if scheme == "sqlite":
        path = rest[1:] if rest.startswith("/") else rest
        return SQLiteStorage(path or ":memory:")
    raise ConfigError(f"unsupported storage scheme {scheme!r}; use memory:// or sqlite://")


__all__ = [
    "create_storage",
    "MemoryStorage",
    "SQLiteStorage",
    "StorageBackend",
    "QueryIterator",
    "Query",
    "FieldFilter",
    "FilterOp",
    "SortOrder",
    "Entity",
    "StorageBackendError",
    "EntityNotFound",
    "CursorError",
    "RowLoadError",
]
