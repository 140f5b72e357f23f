"""Opaque offset cursors bound to a query shape.

A token is ``base64url({"o": offset, "h": shape_hash})``. Decoding checks
the shape hash, so a cursor from one query cannot resume another.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json

from burrow.storage.base import CursorError, Query


def shape_hash(query: Query, length: int = 16) -> str:
    """Deterministic hash of the query shape."""
    content = "|".join(str(part) for part in query.shape())
    return hashlib.sha256(content.encode()).hexdigest()[:length]


def encode_cursor(query: Query, offset: int) -> str:
    payload = json.dumps({"o": offset, "h": shape_hash(query)}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")


def decode_cursor(query: Query, token: str) -> int:
    """Offset encoded in *token*.

    Raises:
        CursorError: malformed token or a different query shape.
    """
    padded = token + "=" * (-len(token) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode()))
        offset = payload["o"]
        digest = payload["h"]
    except (binascii.Error, ValueError, TypeError, KeyError) as e:
        raise CursorError(f"malformed cursor {token!r}") from e
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise CursorError(f"malformed cursor {token!r}")
    if digest != shape_hash(query):
        raise CursorError("cursor belongs to a different query")
    return offset


__all__ = ["shape_hash", "encode_cursor", "decode_cursor"]
