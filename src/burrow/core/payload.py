"""
Payload base class and lifecycle hook contract.

A payload is the typed data stored under a key. Registered kinds map to
:class:`Payload` subclasses; the engine instantiates them by name, binds
request bodies into them, and calls their hooks around storage primitives.

Hooks are optional: the base class implements every one as a no-op, so a
kind overrides only the ones it needs. A hook fails the action by raising
(any exception) or by calling ``resource.mark_error(...)``.

Hook order per action::

    Create   before_save → put → after_save
    Read     before_load → get → after_load
    Update   before_save → put → after_save
    Delete   (Read) → before_delete → delete → after_delete

Usage:
    >>> class Order(Payload):
    ...     locked_fields = frozenset({"number"})
    ...     number: int = 0
    ...     status: str = ""
    ...     def before_save(self, resource):
    ...         if not self.status:
    ...             self.status = "open"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from burrow.engine.resource import Resource


class Payload(BaseModel):
    """Base for registered kinds.

    Every field needs a default so that a zero-valued instance can be built
    with no arguments. ``locked_fields`` lists fields a patch may not change.
    """

    model_config = ConfigDict(extra="ignore")

    locked_fields: ClassVar[frozenset[str]] = frozenset()

    def before_save(self, resource: Resource) -> None:
        pass

    def after_save(self, resource: Resource) -> None:
        pass

    def before_load(self, resource: Resource) -> None:
        pass

    def after_load(self, resource: Resource) -> None:
        pass

    def before_delete(self, resource: Resource) -> None:
        pass

    def after_delete(self, resource: Resource) -> None:
        pass

    # -- Storage mapping ----------------------------------------------------

    def to_row(self) -> dict[str, Any]:
        """JSON-compatible dict handed to storage."""
        return self.model_dump(mode="json")

    def load_row(self, row: Mapping[str, Any]) -> None:
        """Materialize a stored row into this instance, in place.

        Raises:
            pydantic.ValidationError: the row does not fit this kind.
        """
        loaded = self.model_validate(dict(row))
        for name in type(self).model_fields:
            setattr(self, name, getattr(loaded, name))


__all__ = ["Payload"]
