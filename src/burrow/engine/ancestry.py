"""Ancestry validation for keys about to be created.

Two phases: the structural check (:meth:`KindRegistry.validate_key_chain`,
no I/O), then one keys-only existence count per ancestor, walking from the
leaf's parent up to the root. The first missing ancestor fails the check.
"""

from __future__ import annotations

from burrow.core.deadline import Deadline
from burrow.core.errors import AncestorNotFoundError
from burrow.core.keys import Key
from burrow.core.logging import get_logger
from burrow.core.registry import KindRegistry
from burrow.engine.gateway import StorageGateway
from burrow.storage.base import Query

logger = get_logger(__name__)


def check_ancestors(
    key: Key,
    registry: KindRegistry,
    gateway: StorageGateway,
    deadline: Deadline | None = None,
) -> None:
    """Raise unless *key* is well formed and every ancestor is stored.

    Raises:
        InvalidPathError, InvalidHierarchyError: structural failure
        AncestorNotFoundError: an ancestor is missing from storage
        StorageCountError: the existence check itself failed
    """
    registry.validate_key_chain(key)
    for ancestor in key.ancestors():
        found = gateway.count(Query(kind=ancestor.kind, key=ancestor, keys_only=True), deadline)
        if found == 0:
            logger.debug("ancestor_missing", key=str(key), ancestor=str(ancestor))
            raise AncestorNotFoundError(f"The ancestor {ancestor} for this key was not found")


__all__ = ["check_ancestors"]
