"""
burrow.engine: Resources, the action state machine, ancestry checks and
list pagination.
"""

from burrow.engine.actions import ActionEngine
from burrow.engine.ancestry import check_ancestors
from burrow.engine.binding import bind_payload, decode_body, merge_payload
from burrow.engine.gateway import StorageGateway
from burrow.engine.listing import ListRequest, build_query, clamp_page_size, parse_filter, parse_sort
from burrow.engine.resource import Action, Resource

__all__ = [
    "ActionEngine",
    "Action",
    "Resource",
    "ListRequest",
    "StorageGateway",
    "check_ancestors",
    "decode_body",
    "bind_payload",
    "merge_payload",
    "clamp_page_size",
    "parse_filter",
    "parse_sort",
    "build_query",
]
