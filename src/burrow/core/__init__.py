"""
burrow.core: keys, kinds, payloads, errors and the ambient stack.

Everything here is free of storage and transport concerns:

- ``keys``      Key/path codec
- ``registry``  kind and paternity registry
- ``payload``   payload base class and hook contract
- ``errors``    error taxonomy
- ``deadline``  per-request deadlines
- ``settings``  pydantic-settings configuration
- ``logging``   structlog setup
"""

from burrow.core.errors import (
    AncestorNotFoundError,
    BurrowError,
    ConfigError,
    ContractViolation,
    EmptyRequestBodyError,
    ErrorKind,
    ErrorStatus,
    InvalidCursorError,
    InvalidHierarchyError,
    InvalidPathError,
    InvalidQueryError,
    ModelNotRegisteredError,
    RequestBodyUnparseableError,
    RequestBodyUnreadableError,
    StorageCountError,
    StorageDeleteError,
    StorageReadError,
    StorageWriteError,
    UnknownError,
    classify_error,
)
from burrow.core.keys import Key, KeySegment, format_path, nearest_ancestor_of_kind, parse_path, root_ancestor
from burrow.core.payload import Payload
from burrow.core.registry import (
    KindRegistry,
    get_registry,
    load_models,
    register_kind,
    register_paternity,
    reset_registry,
)

__all__ = [
    # Errors
    "ErrorKind",
    "ErrorStatus",
    "BurrowError",
    "InvalidPathError",
    "InvalidHierarchyError",
    "AncestorNotFoundError",
    "ModelNotRegisteredError",
    "EmptyRequestBodyError",
    "RequestBodyUnreadableError",
    "RequestBodyUnparseableError",
    "InvalidCursorError",
    "InvalidQueryError",
    "StorageReadError",
    "StorageWriteError",
    "StorageDeleteError",
    "StorageCountError",
    "UnknownError",
    "ContractViolation",
    "ConfigError",
    "classify_error",
    # Keys
    "Key",
    "KeySegment",
    "parse_path",
    "format_path",
    "nearest_ancestor_of_kind",
    "root_ancestor",
    # Payloads / registry
    "Payload",
    "KindRegistry",
    "get_registry",
    "reset_registry",
    "register_kind",
    "register_paternity",
    "load_models",
]
