"""
Hierarchical keys and their slash-delimited path form.

A :class:`Key` is an immutable chain of ``(kind, id)`` segments ordered
root-to-leaf. Its external form is a path::

    /account/1/order/77        complete key (every segment has an id)
    /account/1/order           incomplete key (leaf id requested from storage)

Only the leaf may lack an id. Keys are never mutated; when storage assigns
an id the key is replaced with :meth:`Key.with_id`.

Manifesto:
    - **Pure:** No I/O, no registry lookups, deterministic
    - **Lossless:** ``parse_path(format_path(k)) == k`` for complete keys
    - **Immutable:** Frozen dataclasses, safe to share and hash

Examples:
    >>> key = parse_path("/account/1/order")
    >>> key.kind, key.id, key.is_complete
    ('order', None, False)
    >>> format_path(key.with_id(77))
    '/account/1/order/77'
    >>> format_path(root_ancestor(key))
    '/account/1'

Tags:
    keys, paths, codec, hierarchy, burrow-core
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from burrow.core.errors import InvalidPathError

PATH_PATTERN = re.compile(r"^(?:/[a-z]+/[0-9]+)*(?:/[a-z]+)?$")
KIND_PATTERN = re.compile(r"^[a-z]+$")

# Ids are signed 64-bit integers on the storage side.
MAX_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class KeySegment:
    """One ``(kind, id)`` pair of a key chain."""

    kind: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class Key:
    """Immutable root-to-leaf chain of key segments."""

    segments: tuple[KeySegment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise InvalidPathError(hint="a key needs at least one segment")

    # -- Leaf accessors ---------------------------------------------------

    @property
    def kind(self) -> str:
        return self.segments[-1].kind

    @property
    def id(self) -> int | None:
        return self.segments[-1].id

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def parent(self) -> Key | None:
        """Key of the immediate ancestor, ``None`` at root."""
        if len(self.segments) == 1:
            return None
        return Key(self.segments[:-1])

    @property
    def is_complete(self) -> bool:
        return all(segment.id is not None for segment in self.segments)

    @property
    def is_incomplete(self) -> bool:
        """True when exactly the leaf id is absent."""
        return self.id is None and all(s.id is not None for s in self.segments[:-1])

    # -- Derivations --------------------------------------------------------

    def with_id(self, id: int) -> Key:
        """Return a copy of this key whose leaf carries *id*."""
        return Key(self.segments[:-1] + (KeySegment(self.kind, id),))

    def child(self, kind: str, id: int | None = None) -> Key:
        return Key(self.segments + (KeySegment(kind, id),))

    def ancestors(self) -> Iterator[Key]:
        """Yield ancestor keys from the immediate parent up to the root."""
        key = self.parent
        while key is not None:
            yield key
            key = key.parent

    def is_ancestor_of(self, other: Key) -> bool:
        return other.depth > self.depth and other.segments[: self.depth] == self.segments

    def __str__(self) -> str:
        return format_path(self)


def parse_path(path: str) -> Key:
    """Parse a path into a Key.

    Raises:
        InvalidPathError: empty string, grammar mismatch, or an id outside
            the 64-bit range.
    """
    if not path:
        raise InvalidPathError(hint="path is empty")
    if not PATH_PATTERN.fullmatch(path):
        raise InvalidPathError(hint=f"path {path!r} does not match /kind/id/.../kind[/id]")

    tokens = path[1:].split("/")
    segments = []
    for i in range(0, len(tokens), 2):
        kind = tokens[i]
        if i + 1 < len(tokens):
            id = int(tokens[i + 1])
            if id > MAX_ID:
                raise InvalidPathError(hint=f"id {tokens[i + 1]} is out of range")
            segments.append(KeySegment(kind, id))
        else:
            segments.append(KeySegment(kind))
    return Key(tuple(segments))


def format_path(key: Key) -> str:
    """Render *key* root-to-leaf; the leaf id is appended only when present."""
    parts = []
    for segment in key.segments:
        parts.append(f"/{segment.kind}")
        if segment.id is not None:
            parts.append(f"/{segment.id}")
    return "".join(parts)


def nearest_ancestor_of_kind(key: Key, kind: str) -> Key | None:
    """Key of the nearest ancestor of *kind*.

    Only when no ancestor matches is the key itself considered.
    """
    for ancestor in key.ancestors():
        if ancestor.kind == kind:
            return ancestor
    if key.kind == kind:
        return key
    return None


def root_ancestor(key: Key) -> Key:
    """Key made of the outermost segment only."""
    return Key(key.segments[:1])


__all__ = [
    "Key",
    "KeySegment",
    "PATH_PATTERN",
    "KIND_PATTERN",
    "parse_path",
    "format_path",
    "nearest_ancestor_of_kind",
    "root_ancestor",
]
