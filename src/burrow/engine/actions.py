"""
Action engine: sequences payload hooks around storage primitives.

Manifesto:
    Every request is one Resource driven through one action. The engine
    decides the order of steps; payloads decide what happens inside their
    hooks; storage only ever sees get/put/delete/count/query. The first
    failure is recorded on the Resource and nothing runs after it.

    - **Fail-fast:** Any error aborts the remaining steps of the action
    - **No partial commit:** Nothing is written after a failed step
    - **Partial pages:** A bad list row fails alone, the page continues
    - **Fatal misuse:** Action-stack misuse raises ContractViolation

Architecture:
    ::

        Create   validate chain / ancestors → bind → before_save → put
                 → after_save → (Read)
        Read     complete key → fresh payload → before_load → get
                 → load row → after_load
        Update   complete key → bind → before_save → put → after_save
        Patch    decode body → Read → merge → Update
        Delete   Read → before_delete → delete → after_delete
        List     chain → query → per row: fresh payload → before_load
                 → load row → after_load
        ListAny  like List, scoped to every descendant of the parent

Examples:
    >>> engine = ActionEngine(MemoryStorage(), registry)
    >>> resource = engine.create(engine.resource("/account"), b'{"name": "acme"}')
    >>> resource.path
    '/account/1'
    >>> engine.read(engine.resource("/account/1")).data.name
    'acme'

Tags:
    engine, actions, hooks, lifecycle, state-machine
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from burrow.core.deadline import Deadline
from burrow.core.errors import (
    BurrowError,
    ContractViolation,
    ErrorStatus,
    InvalidPathError,
    ModelNotRegisteredError,
    StorageReadError,
    classify_error,
)
from burrow.core.keys import Key, parse_path
from burrow.core.logging import get_logger
from burrow.core.registry import KindRegistry, get_registry
from burrow.core.settings import BurrowSettings
from burrow.engine import ancestry
from burrow.engine.binding import Body, bind_payload, decode_body, merge_payload
from burrow.engine.gateway import StorageGateway
from burrow.engine.listing import ListRequest, build_query, clamp_page_size
from burrow.engine.resource import Action, Resource
from burrow.storage.base import Entity, RowLoadError, StorageBackend

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Resource])


def _action(action: Action) -> Callable[[F], F]:
    """Run the decorated step inside ``action`` on its Resource.

    Skips entirely once the Resource has failed, records any BurrowError
    raised by the step, and times the outermost action.
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self: ActionEngine, resource: Resource, *args: Any, **kwargs: Any) -> Resource:
            outermost = not resource.actions
            if not resource.enter_action(action):
                return resource
            started = time.perf_counter()
            try:
                method(self, resource, *args, **kwargs)
            except BurrowError as e:
                if not resource.failed:
                    logger.warning(
                        "action_failed",
                        action=action.value,
                        path=resource.path,
                        error=e.kind.value,
                        hint=e.hint,
                        debug=e.debug,
                    )
                resource.mark_error(e)
            resource.exit_action(action)
            if outermost:
                resource.elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            return resource

        return wrapper  # type: ignore[return-value]

    return decorator


class ActionEngine:
    """Drives Resources through create/read/update/patch/delete/list.

    The engine holds no per-request state; one instance serves every
    request concurrently.
    """

    def __init__(
        self,
        storage: StorageBackend,
        registry: KindRegistry | None = None,
        settings: BurrowSettings | None = None,
    ):
        self.storage = storage
        self.gateway = StorageGateway(storage)
        self.registry = registry or get_registry()
        self.settings = settings or BurrowSettings()

    # -- Resource factories -----------------------------------------------

    def resource(self, path: str, *, timeout: float | None = None) -> Resource:
        """Fresh Resource for *path*.

        A path that does not parse yields a Resource already carrying the
        InvalidPathError, so every action on it is a no-op.
        """
        seconds = timeout if timeout is not None else self.settings.request_timeout
        deadline = Deadline.after(seconds, operation=path) if seconds is not None else None
        try:
            key = parse_path(path)
        except InvalidPathError as e:
            resource = Resource(None, deadline=deadline, raw_path=path)
            resource.mark_error(e)
            return resource
        return Resource(key, deadline=deadline)

    def new_child(self, parent: Resource, kind: str) -> Resource:
        """Incomplete child Resource of *kind* under *parent*, payload instantiated."""
        child = Resource(None, deadline=parent.deadline, raw_path=f"{parent.path}/{kind}")
        if parent.key is None or not parent.key.is_complete:
            child.mark_error(InvalidPathError(hint=f"parent {parent.path!r} needs a complete key"))
            return child
        try:
            self.registry.validate_paternity(parent.key.kind, kind)
            child.key = parent.key.child(kind)
            child.data = self.registry.instantiate(kind)
        except BurrowError as e:
            child.mark_error(e)
        return child

    # -- Step helpers -------------------------------------------------------

    def _run_hook(self, resource: Resource, name: str) -> None:
        hook = getattr(resource.data, name, None)
        if hook is None:
            return
        logger.debug("hook_invoked", hook=name, path=resource.path)
        try:
            result = hook(resource)
        except (BurrowError, ContractViolation):
            raise
        except Exception as e:
            raise classify_error(e) from e
        if isinstance(result, BaseException):
            raise classify_error(result)
        if resource.failed:
            raise resource.error

    def _require_key(self, resource: Resource) -> Key:
        if resource.key is None:
            raise InvalidPathError()
        return resource.key

    def _require_complete(self, resource: Resource, action: str) -> Key:
        key = self._require_key(resource)
        if not key.is_complete:
            raise InvalidPathError(hint=f"{action} needs a complete key, got {resource.path}")
        self.registry.validate_key_chain(key)
        return key

    def _bind(self, resource: Resource, body: Body) -> None:
        if body is None and resource.data is not None:
            return
        fields = decode_body(body)
        if resource.data is None:
            resource.data = self.registry.instantiate(self._require_key(resource).kind)
        bind_payload(resource.data, fields)

    def _materialize(self, resource: Resource, entity: Entity) -> None:
        try:
            resource.data.load_row(entity.data)
        except ValidationError as e:
            raise StorageReadError(
                f"Stored row at {entity.key} does not fit kind {entity.key.kind!r}",
                status=ErrorStatus.INTERNAL,
                cause=e,
            ) from e
        resource.created_at = entity.created_at

    # -- Actions ------------------------------------------------------------

    @_action(Action.CREATE)
    def create(
        self,
        resource: Resource,
        body: Body = None,
        *,
        check_ancestors: bool | None = None,
        reload: bool | None = None,
    ) -> Resource:
        """Store a new entity under ``resource.key``.

        *body* is decoded only when no payload is bound yet. An incomplete
        key gets its leaf id from storage. ``check_ancestors`` and ``reload``
        default to ``settings.check_ancestors``.
        """
        key = self._require_key(resource)
        verify = self.settings.check_ancestors if check_ancestors is None else check_ancestors
        reload = verify if reload is None else reload
        if verify:
            ancestry.check_ancestors(key, self.registry, self.gateway, resource.deadline)
        else:
            self.registry.validate_key_chain(key)

        if resource.data is None:
            self._bind(resource, body)
        self._run_hook(resource, "before_save")
        resource.key = self.gateway.put(key, resource.data.to_row(), resource.deadline)
        logger.info("resource_created", path=resource.path)
        self._run_hook(resource, "after_save")

        if reload:
            self.read(resource)
        return resource

    @_action(Action.READ)
    def read(self, resource: Resource) -> Resource:
        """Load ``resource.key`` into a freshly instantiated payload."""
        key = self._require_complete(resource, "read")
        resource.data = self.registry.instantiate(key.kind)
        self._run_hook(resource, "before_load")
        entity = self.gateway.get(key, resource.deadline)
        self._materialize(resource, entity)
        self._run_hook(resource, "after_load")
        return resource

    @_action(Action.UPDATE)
    def update(self, resource: Resource, body: Body = None) -> Resource:
        """Overwrite the entity at ``resource.key`` with the bound payload."""
        key = self._require_complete(resource, "update")
        self._bind(resource, body)
        self._run_hook(resource, "before_save")
        self.gateway.put(key, resource.data.to_row(), resource.deadline)
        logger.info("resource_updated", path=resource.path)
        self._run_hook(resource, "after_save")
        return resource

    @_action(Action.PATCH)
    def patch(self, resource: Resource, body: Body = None) -> Resource:
        """Read, merge the fields present in *body*, then update."""
        fields = decode_body(body)
        self.read(resource)
        if resource.failed:
            return resource
        merge_payload(resource.data, fields)
        self.update(resource)
        return resource

    @_action(Action.DELETE)
    def delete(self, resource: Resource) -> Resource:
        self.read(resource)
        if resource.failed:
            return resource
        self._run_hook(resource, "before_delete")
        self.gateway.delete(resource.key, resource.deadline)
        logger.info("resource_deleted", path=resource.path)
        self._run_hook(resource, "after_delete")
        return resource

    @_action(Action.LIST)
    def list(self, resource: Resource, request: ListRequest | None = None) -> Resource:
        """One page of direct children of ``key.parent`` of kind ``key.kind``."""
        key = self._require_key(resource)
        if not key.is_incomplete:
            raise InvalidPathError(hint=f"list needs a path ending in a bare kind, got {resource.path}")
        self.registry.validate_key_chain(key)
        self._page(resource, request or ListRequest(), any_depth=False)
        return resource

    @_action(Action.LIST_ANY)
    def list_any(self, resource: Resource, request: ListRequest | None = None) -> Resource:
        """One page of every descendant of ``key.parent`` of kind ``key.kind``."""
        key = self._require_key(resource)
        if not key.is_incomplete:
            raise InvalidPathError(hint=f"list needs a path ending in a bare kind, got {resource.path}")
        if key.parent is not None:
            self.registry.validate_key_chain(key.parent)
        if not self.registry.is_registered(key.kind):
            raise ModelNotRegisteredError(hint=f"kind {key.kind!r} is not registered")
        self._page(resource, request or ListRequest(), any_depth=True)
        return resource

    # -- Listing ------------------------------------------------------------

    def _page(self, resource: Resource, request: ListRequest, *, any_depth: bool) -> None:
        resource.is_list = True
        resource.resources = []
        resource.next_cursor = ""
        page_size = clamp_page_size(request.size, self.settings.default_page_size, self.settings.max_page_size)
        query = build_query(resource.key, request, page_size, any_depth=any_depth)
        iterator = self.gateway.run_query(query, resource.deadline)

        # Rows are pulled strictly in order: the iterator carries the cursor.
        for _ in range(page_size):
            try:
                entity = self.gateway.next_row(iterator, resource.deadline)
            except RowLoadError as e:
                child = resource.spawn_child(e.key)
                child.mark_error(StorageReadError(status=ErrorStatus.INTERNAL, cause=e))
                logger.warning("list_row_failed", path=child.path, error=child.error.kind.value, debug=str(e))
                resource.resources.append(child)
                continue
            if entity is None:
                break
            resource.resources.append(self._load_row(resource, entity, request.include_data))

        resource.next_cursor = iterator.cursor()
        logger.debug("list_page_built", path=resource.path, rows=resource.resources_count, more=bool(resource.next_cursor))

    def _load_row(self, parent: Resource, entity: Entity, include_data: bool) -> Resource:
        child = parent.spawn_child(entity.key)
        try:
            child.data = self.registry.instantiate(entity.key.kind)
            self._run_hook(child, "before_load")
            self._materialize(child, entity)
            self._run_hook(child, "after_load")
        except BurrowError as e:
            if not child.failed:
                logger.warning("list_row_failed", path=child.path, error=e.kind.value, debug=e.debug)
            child.mark_error(e)
        if not include_data:
            child.data = None
        return child


__all__ = ["ActionEngine"]
