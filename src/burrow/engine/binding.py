"""Request-body decoding and payload binding.

Bodies arrive as raw bytes (HTTP), text, or an already decoded mapping.
Full binding replaces every field; merge binding only touches the fields
present in the body and leaves locked fields alone.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from burrow.core.errors import (
    EmptyRequestBodyError,
    RequestBodyUnparseableError,
    RequestBodyUnreadableError,
)
from burrow.core.logging import get_logger
from burrow.core.payload import Payload

logger = get_logger(__name__)

Body = bytes | str | Mapping[str, Any] | None


def decode_body(body: Body) -> dict[str, Any]:
    """Turn a request body into a dict of fields.

    Raises:
        EmptyRequestBodyError: no body, or fewer than two bytes
        RequestBodyUnreadableError: bytes that are not UTF-8
        RequestBodyUnparseableError: not JSON, or JSON that is not an object
    """
    if body is None:
        raise EmptyRequestBodyError()
    if isinstance(body, Mapping):
        return dict(body)
    if len(body) < 2:
        raise EmptyRequestBodyError()
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RequestBodyUnreadableError(cause=e) from e
    try:
        fields = json.loads(body)
    except ValueError as e:
        raise RequestBodyUnparseableError(cause=e) from e
    if not isinstance(fields, dict):
        raise RequestBodyUnparseableError(hint=f"expected a JSON object, got {type(fields).__name__}")
    return fields


def _assign(payload: Payload, fields: Mapping[str, Any]) -> None:
    try:
        loaded = payload.model_validate(dict(fields))
    except ValidationError as e:
        raise RequestBodyUnparseableError(cause=e) from e
    for name in type(payload).model_fields:
        setattr(payload, name, getattr(loaded, name))


def bind_payload(payload: Payload, fields: Mapping[str, Any]) -> None:
    """Full overwrite: fields missing from *fields* fall back to their defaults."""
    _assign(payload, fields)


def merge_payload(payload: Payload, fields: Mapping[str, Any]) -> list[str]:
    """Merge *fields* into *payload*; returns the locked fields that were skipped."""
    known = type(payload).model_fields
    merged = payload.model_dump()
    skipped = []
    for name, value in fields.items():
        if name not in known:
            continue
        if name in payload.locked_fields:
            skipped.append(name)
            continue
        merged[name] = value
    if skipped:
        logger.debug("locked_fields_skipped", fields=skipped, kind=type(payload).__name__)
    _assign(payload, merged)
    return skipped


__all__ = ["Body", "decode_body", "bind_payload", "merge_payload"]
