"""Models module registering into the default registry at import time.

Used by ``load_models`` and CLI tests (``--models tests._support.models``).
"""

from __future__ import annotations

from burrow.core.payload import Payload
from burrow.core.registry import register_kind


@register_kind("team", parents=[""])
class Team(Payload):
    name: str = ""


@register_kind("member", parents=["team"])
class Member(Payload):
    email: str = ""
