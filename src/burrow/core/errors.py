"""
Structured error types for the burrow resource engine.

Every request-time failure the engine can record on a Resource is a
:class:`BurrowError`. Instead of bare exceptions that lose their meaning at
the transport boundary, each error carries:

- **Kind:** Stable, machine-readable category (:class:`ErrorKind`)
- **Status:** Externally visible classification (:class:`ErrorStatus`),
  used only when the transport maps the error to a response code
- **Description / hint:** Human text, the hint educates on common mistakes
- **Cause:** The original failure, chained for diagnostics

Developer-time contract violations are NOT part of this hierarchy. They
raise :class:`ContractViolation`, which the engine never catches.

Manifesto:
    - **One error per Resource:** The first failure is recorded, later ones
      are ignored
    - **Stable categories:** Clients branch on ``kind``, never on message text
    - **Error chaining:** Always keep the original exception as ``cause``
    - **Fatal vs recoverable:** Programming mistakes crash loudly, bad
      requests become structured errors

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                         BurrowError                              │
        │        (kind, status, description, hint, cause, debug)           │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  InvalidPathError        InvalidHierarchyError                   │
        │  AncestorNotFoundError   ModelNotRegisteredError                 │
        │  EmptyRequestBodyError   RequestBodyUnreadableError              │
        │  RequestBodyUnparseableError   InvalidCursorError                │
        │  InvalidQueryError                                               │
        │  StorageReadError   StorageWriteError   StorageDeleteError       │
        │  StorageCountError       UnknownError                            │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        ContractViolation   (fatal, never recorded on a Resource)
        ConfigError         (bootstrap only)

Examples:
    Chaining a storage failure:

    >>> try:
    ...     raise OSError("disk full")
    ... except OSError as e:
    ...     error = StorageWriteError(cause=e)
    >>> error.kind
    <ErrorKind.STORAGE_WRITE_FAILED: 'storage_write_failed'>
    >>> error.to_dict()["debug"]
    'disk full'

    Overriding the hint:

    >>> InvalidPathError(hint="key id 0 at level 1").hint
    'key id 0 at level 1'

Guardrails:
    ❌ DON'T: Raise ContractViolation for bad client input
    ✅ DO: Use the BurrowError subclass matching the failing step

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-taxonomy, burrow-core
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable categories for request-time errors."""

    INVALID_PATH = "invalid_path"
    INVALID_HIERARCHY = "invalid_hierarchy"
    ANCESTOR_NOT_FOUND = "ancestor_not_found"
    MODEL_NOT_REGISTERED = "model_not_registered"
    EMPTY_REQUEST_BODY = "empty_request_body"
    REQUEST_BODY_UNREADABLE = "request_body_unreadable"
    REQUEST_BODY_UNPARSEABLE = "request_body_unparseable"
    INVALID_CURSOR = "invalid_cursor"
    INVALID_QUERY = "invalid_query"
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    STORAGE_DELETE_FAILED = "storage_delete_failed"
    STORAGE_COUNT_FAILED = "storage_count_failed"
    UNKNOWN = "unknown"


class ErrorStatus(str, Enum):
    """Externally visible classification, mapped to a code by the transport."""

    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class BurrowError(Exception):
    """
    Base exception for every error recorded on a Resource.

    Subclasses set ``default_kind``, ``default_status``,
    ``default_description`` and ``default_hint``. Instances may override the
    message, hint and status.

    Attributes:
        kind: ErrorKind category
        status: ErrorStatus classification
        description: Human-readable explanation
        hint: Guidance for fixing a common mistake (may be empty)
        cause: Underlying exception, also set as ``__cause__``
        context: Extra key/value metadata for logging
    """

    default_kind: ErrorKind = ErrorKind.UNKNOWN
    default_status: ErrorStatus = ErrorStatus.INTERNAL
    default_description: str = "Got some error not well described by the framework"
    default_hint: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        hint: str | None = None,
        status: ErrorStatus | None = None,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.description = message or self.default_description
        super().__init__(self.description)
        self.kind = self.default_kind
        self.status = status or self.default_status
        self.hint = hint if hint is not None else self.default_hint
        self.cause = cause
        self.context = dict(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def debug(self) -> str:
        """Original error message, empty when there is no cause."""
        return str(self.cause) if self.cause is not None else ""

    def with_context(self, **kwargs: Any) -> BurrowError:
        """Attach metadata (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Structured form for the response boundary and logs."""
        return {
            "name": self.kind.value,
            "description": self.description,
            "hint": self.hint,
            "debug": self.debug,
            "status": self.status.value,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.description!r}, kind={self.kind.value})"


# =============================================================================
# PATH / HIERARCHY ERRORS
# =============================================================================


class InvalidPathError(BurrowError):
    default_kind = ErrorKind.INVALID_PATH
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The path used is not valid"
    default_hint = "Paths look like /kind/id/kind/id or end with a bare /kind"


class InvalidHierarchyError(BurrowError):
    default_kind = ErrorKind.INVALID_HIERARCHY
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The path has invalid objects hierarchy"
    default_hint = "Verify that the path requested has all elements implemented and or registered correctly"


class AncestorNotFoundError(BurrowError):
    default_kind = ErrorKind.ANCESTOR_NOT_FOUND
    default_status = ErrorStatus.NOT_FOUND
    default_description = "The ancestor for this key was not found"
    default_hint = "Verify that the path is valid"


class ModelNotRegisteredError(BurrowError):
    default_kind = ErrorKind.MODEL_NOT_REGISTERED
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The path has objects not implemented"
    default_hint = "Verify that the path requested has all elements implemented and or registered correctly"


# =============================================================================
# REQUEST BODY ERRORS
# =============================================================================


class EmptyRequestBodyError(BurrowError):
    default_kind = ErrorKind.EMPTY_REQUEST_BODY
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "There was no data found on the request body"
    default_hint = "Check that the request is of the right method and valid json"


class RequestBodyUnreadableError(BurrowError):
    default_kind = ErrorKind.REQUEST_BODY_UNREADABLE
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "Error reading request body"
    default_hint = "Verify the presence of invalid characters"


class RequestBodyUnparseableError(BurrowError):
    default_kind = ErrorKind.REQUEST_BODY_UNPARSEABLE
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The body could not be interpreted as json and bound to the data object"


class InvalidCursorError(BurrowError):
    default_kind = ErrorKind.INVALID_CURSOR
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The cursor passed on the request is not valid for this query"
    default_hint = "Restart the listing pagination to get valid cursors"


class InvalidQueryError(BurrowError):
    default_kind = ErrorKind.INVALID_QUERY
    default_status = ErrorStatus.BAD_REQUEST
    default_description = "The listing parameters are not valid"
    default_hint = "Filters look like field=value or field>=value, sort fields are plain field names"


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageReadError(BurrowError):
    default_kind = ErrorKind.STORAGE_READ_FAILED
    default_status = ErrorStatus.NOT_FOUND
    default_description = "Could not get from storage"


class StorageWriteError(BurrowError):
    default_kind = ErrorKind.STORAGE_WRITE_FAILED
    default_description = "Could not put to storage"


class StorageDeleteError(BurrowError):
    default_kind = ErrorKind.STORAGE_DELETE_FAILED
    default_description = "Could not delete in storage"


class StorageCountError(BurrowError):
    default_kind = ErrorKind.STORAGE_COUNT_FAILED
    default_description = "Could not count in storage"


class UnknownError(BurrowError):
    """Hook or caller-supplied error not otherwise classified."""


# =============================================================================
# NON-REQUEST ERRORS
# =============================================================================


class ContractViolation(Exception):
    """
    A developer-time contract was broken.

    Raised for duplicate kind registration, registration after the registry
    was sealed, and action-stack misuse. Never recorded on a Resource and
    never caught by the engine: the calling code has a logic error.
    """


class ConfigError(Exception):
    """Bootstrap configuration is missing or invalid."""


def classify_error(error: BaseException) -> BurrowError:
    """Return *error* itself if it is a BurrowError, else wrap it as UnknownError."""
    if isinstance(error, BurrowError):
        return error
    return UnknownError(str(error) or error.__class__.__name__, cause=error)


__all__ = [
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
]
