"""Sample kinds: accounts own orders and fragile rows, orders own items.

Every hook call is appended to ``HOOK_CALLS`` as ``(hook, path)`` so tests
can assert on hook order across freshly instantiated payloads.
"""

from __future__ import annotations

from burrow.core.errors import UnknownError
from burrow.core.payload import Payload
from burrow.core.registry import KindRegistry

HOOK_CALLS: list[tuple[str, str]] = []


def hook_names() -> list[str]:
    return [name for name, _ in HOOK_CALLS]


class RecordingPayload(Payload):
    def before_save(self, resource):
        HOOK_CALLS.append(("before_save", resource.path))

    def after_save(self, resource):
        HOOK_CALLS.append(("after_save", resource.path))

    def before_load(self, resource):
        HOOK_CALLS.append(("before_load", resource.path))

    def after_load(self, resource):
        HOOK_CALLS.append(("after_load", resource.path))

    def before_delete(self, resource):
        HOOK_CALLS.append(("before_delete", resource.path))

    def after_delete(self, resource):
        HOOK_CALLS.append(("after_delete", resource.path))


class Account(RecordingPayload):
    name: str = ""


class Order(RecordingPayload):
    locked_fields = frozenset({"number"})

    number: int = 0
    status: str = ""
    total: int = 0

    def before_save(self, resource):
        super().before_save(resource)
        if self.status == "forbidden":
            raise ValueError("status 'forbidden' cannot be saved")


class Item(RecordingPayload):
    sku: str = ""
    qty: int = 0

    def before_save(self, resource):
        super().before_save(resource)
        if self.qty < 0:
            resource.mark_error(UnknownError("quantity cannot be negative"))


class Fragile(Payload):
    """Rows with a negative value fail in after_load."""

    value: int = 0

    def after_load(self, resource):
        if self.value < 0:
            raise ValueError(f"negative value {self.value}")


class Note(Payload):
    """Kind with no hooks of its own beyond the no-op defaults."""

    text: str = ""


def build_registry() -> KindRegistry:
    registry = KindRegistry()
    registry.register_kind("account", Account)
    registry.register_kind("order", Order)
    registry.register_kind("item", Item)
    registry.register_kind("fragile", Fragile)
    registry.register_kind("note", Note)
    registry.register_paternity("", "account")
    registry.register_paternity("", "note")
    registry.register_paternity("account", "order")
    registry.register_paternity("account", "fragile")
    registry.register_paternity("order", "item")
    registry.seal()
    return registry
