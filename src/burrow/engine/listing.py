"""
List request parsing and query construction.

Transport parameters (page size, cursor, filters, sort fields, depth) are
normalized here into a :class:`ListRequest`, then into a storage
:class:`~burrow.storage.base.Query` for one page.

Filter syntax:
    ::

        status=open        equality
        status!=closed     inequality
        total>=10          ordering (<, <=, >, >=)

    Values are read as JSON when they parse (``10``, ``true``, ``null``,
    ``"10"``), otherwise as plain strings. Object and array values are
    rejected.

Tags:
    engine, listing, pagination, filters, cursor
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from burrow.core.errors import InvalidQueryError
from burrow.core.keys import Key
from burrow.storage.base import FieldFilter, FilterOp, Query, SortOrder

FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_FILTER_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)(!=|<=|>=|=|<|>)(.*)$", re.DOTALL)


@dataclass(frozen=True)
class ListRequest:
    """Pagination controls for one page."""

    size: int | str | None = None
    cursor: str | None = None
    filters: tuple[FieldFilter, ...] = ()
    orders: tuple[SortOrder, ...] = ()
    include_data: bool = True

    @classmethod
    def from_params(
        cls,
        *,
        size: int | str | None = None,
        cursor: str | None = None,
        filters: Iterable[str] = (),
        ascending: Iterable[str] = (),
        descending: Iterable[str] = (),
        depth: int | None = None,
    ) -> ListRequest:
        """Build from raw transport parameters (``l``, ``n``, ``f``, ``a``, ``z``, ``d``).

        Ascending sort fields come first, then descending ones, each in the
        order given.
        """
        orders = tuple(parse_sort(name) for name in ascending) + tuple(
            parse_sort(name, descending=True) for name in descending
        )
        return cls(
            size=size,
            cursor=cursor or None,
            filters=tuple(parse_filter(expr) for expr in filters),
            orders=orders,
            include_data=depth is None or depth > 0,
        )


def clamp_page_size(requested: int | str | None, default: int, maximum: int) -> int:
    """Page size within ``[1, maximum]``.

    Missing, unparseable, zero or negative sizes give *default*; sizes above
    *maximum* give *maximum*.
    """
    if requested is None or isinstance(requested, bool):
        return default
    try:
        size = int(requested)
    except (TypeError, ValueError):
        return default
    if size < 1:
        return default
    return min(size, maximum)


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_filter(expression: str) -> FieldFilter:
    """Parse ``<field><op><value>``.

    Raises:
        InvalidQueryError: no operator, an invalid field name, or an
            object or array value.
    """
    match = _FILTER_PATTERN.match(expression.strip())
    if not match:
        raise InvalidQueryError(hint=f"cannot read filter {expression!r}; use field=value, field>=value ...")
    name, op, raw = match.groups()
    value = _parse_value(raw)
    if isinstance(value, (dict, list)):
        raise InvalidQueryError(hint=f"filter {expression!r} compares against an object or array; use a scalar value")
    return FieldFilter(name=name, op=FilterOp(op), value=value)


def parse_sort(name: str, descending: bool = False) -> SortOrder:
    name = name.strip()
    if not FIELD_PATTERN.match(name):
        raise InvalidQueryError(hint=f"cannot sort on {name!r}; sort fields are plain field names")
    return SortOrder(name=name, descending=descending)


def build_query(key: Key, request: ListRequest, page_size: int, *, any_depth: bool = False) -> Query:
    """Query for one page of ``key.kind`` rows.

    ``any_depth`` scopes to every descendant of ``key.parent`` (or to the
    whole kind at root); otherwise to direct children of ``key.parent``.
    """
    parent = key.parent
    if any_depth:
        return Query(
            kind=key.kind,
            ancestor=parent,
            filters=request.filters,
            orders=request.orders,
            limit=page_size,
            start_cursor=request.cursor,
        )
    return Query(
        kind=key.kind,
        parent=parent,
        root_only=parent is None,
        filters=request.filters,
        orders=request.orders,
        limit=page_size,
        start_cursor=request.cursor,
    )


__all__ = [
    "ListRequest",
    "clamp_page_size",
    "parse_filter",
    "parse_sort",
    "build_query",
]
