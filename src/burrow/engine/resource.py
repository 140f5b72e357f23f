"""
Resource: the unit of work driven through one action.

A Resource holds a key, the payload bound to it, the actions currently in
flight, and at most one recorded error. List actions also collect child
Resources (one per row) and the continuation cursor.

Action stack rules:
    ::

        enter_action(a)   no-op once failed; ``a`` already on top → ContractViolation
        exit_action(a)    no-op once failed; top != ``a`` or empty  → ContractViolation
        mark_error(e)     first error wins; stack becomes [ERROR]

Once an error is recorded every later lifecycle step on the Resource is a
no-op. Nested actions (Patch → Read, Delete → Read, Create → Read) keep the
stack at most two deep.

Tags:
    engine, resource, action-stack, state-machine
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from burrow.core.deadline import Deadline
from burrow.core.errors import BurrowError, ContractViolation
from burrow.core.keys import Key, format_path
from burrow.core.payload import Payload


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    PATCH = "patch"
    LIST = "list"
    LIST_ANY = "list_any"
    DELETE = "delete"
    ERROR = "error"


class Resource:
    """One unit of work: key, payload, action stack, error, list results.

    Attributes:
        key: Target key, ``None`` only when the request path did not parse
        data: Bound or loaded payload (``None`` until then)
        error: First recorded error, if any
        created_at: Creation timestamp of the stored entity, once loaded
        actions: Actions currently in flight, innermost last
        history: Every action entered, in order, including no-op entries
        resources: Child Resources produced by a list action
        next_cursor: Continuation cursor of a list page ("" when exhausted)
        elapsed_ms: Wall time of the outermost action
        deadline: Deadline observed before each storage call
    """

    def __init__(
        self,
        key: Key | None,
        data: Payload | None = None,
        *,
        deadline: Deadline | None = None,
        raw_path: str | None = None,
    ):
        self.key = key
        self.data = data
        self.deadline = deadline
        self.error: BurrowError | None = None
        self.created_at: datetime | None = None
        self.actions: list[Action] = []
        self.history: list[Action] = []
        self.resources: list[Resource] = []
        self.next_cursor = ""
        self.is_list = False
        self.elapsed_ms: float | None = None
        self._raw_path = raw_path

    @property
    def path(self) -> str:
        if self.key is not None:
            return format_path(self.key)
        return self._raw_path or ""

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def current_action(self) -> Action | None:
        return self.actions[-1] if self.actions else None

    @property
    def resources_count(self) -> int:
        return len(self.resources)

    # -- Action stack -----------------------------------------------------

    def enter_action(self, action: Action) -> bool:
        """Push *action*. Returns False (and pushes nothing) once failed."""
        if not isinstance(action, Action) or action is Action.ERROR:
            raise ContractViolation(f"unknown_action: {action!r}")
        self.history.append(action)
        if self.failed:
            return False
        if self.actions and self.actions[-1] is action:
            raise ContractViolation(f"repeated_action: {action.value} is already in flight on {self.path}")
        self.actions.append(action)
        return True

    def exit_action(self, action: Action) -> None:
        if self.failed:
            return
        if not self.actions:
            raise ContractViolation(f"nothing_to_exit: {action.value} was never entered on {self.path}")
        if self.actions[-1] is not action:
            raise ContractViolation(
                f"exiting_wrong_action: exiting {action.value} while {self.actions[-1].value} is in flight"
            )
        self.actions.pop()

    def mark_error(self, error: BurrowError) -> None:
        """Record *error* unless one is already recorded."""
        if self.failed:
            return
        self.error = error
        self.actions = [Action.ERROR]

    # -- Children -----------------------------------------------------------

    def spawn_child(self, key: Key) -> Resource:
        """Fresh child Resource for one list row, inheriting the action context."""
        child = Resource(key, deadline=self.deadline)
        child.actions = list(self.actions)
        return child

    # -- Response boundary -------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "path": self.path,
            "data": self.data.model_dump(mode="json") if self.data is not None else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if self.is_list:
            result["resources"] = [child.to_dict() for child in self.resources]
            result["resources_count"] = self.resources_count
            result["next_cursor"] = self.next_cursor
        result["elapsed_ms"] = self.elapsed_ms
        result["error"] = self.error.to_dict() if self.error is not None else None
        return result

    def __repr__(self) -> str:
        state = self.error.kind.value if self.error else (self.current_action.value if self.actions else "idle")
        return f"Resource({self.path!r}, {state})"


__all__ = ["Action", "Resource"]
