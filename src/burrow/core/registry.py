"""Kind registry: kind names, payload factories, and paternity rules.

Manifesto:
    Paths name kinds as strings. The registry is the one place that knows
    which string maps to which payload class, and which kinds may be nested
    under which parent kinds. It is written during startup, sealed, and
    then only read, so request threads share it without locking.

ARCHITECTURE
────────────
::

    KindRegistry
      ├── .register_kind(name, factory)        ─ write-once per name
      ├── .register_paternity(parent, child)   ─ "" parent means root
      ├── .seal()                              ─ integrity check, read-only after
      ├── .instantiate(name)                   ─ fresh zero-valued payload
      ├── .validate_paternity(parent, child)   ─ edge membership
      └── .validate_key_chain(key)             ─ whole chain + root edge

    Module-level default registry:
      get_registry() / reset_registry()
      register_kind(name) decorator, register_paternity(parent, child)
      load_models(modules)                     ─ import, then seal

BEST PRACTICES
──────────────
- Register kinds and paternity from a models module listed in
  ``BurrowSettings.models``; ``load_models`` imports it and seals.
- Pass an explicit ``KindRegistry`` in tests; call ``reset_registry()``
  when a test touches the default one.

Tags:
    burrow-core, registry, kinds, paternity, hierarchy
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable

from burrow.core.errors import (
    ConfigError,
    ContractViolation,
    InvalidHierarchyError,
    InvalidPathError,
    ModelNotRegisteredError,
)
from burrow.core.keys import KIND_PATTERN, Key
from burrow.core.logging import get_logger
from burrow.core.payload import Payload

logger = get_logger(__name__)

ROOT = ""

PayloadFactory = Callable[[], Payload]


class KindRegistry:
    """Injectable kind and paternity registry.

    Example:
        >>> registry = KindRegistry()
        >>> registry.register_kind("account", Account)
        >>> registry.register_kind("order", Order)
        >>> registry.register_paternity("", "account")
        >>> registry.register_paternity("account", "order")
        >>> registry.seal()
        >>> registry.validate_key_chain(parse_path("/account/1/order"))
    """

    def __init__(self) -> None:
        self._kinds: dict[str, PayloadFactory] = {}
        self._children: dict[str, set[str]] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _assert_writable(self, what: str) -> None:
        if self._sealed:
            raise ContractViolation(f"cannot register {what}: kind registry is sealed")

    # -- Registration -------------------------------------------------------

    def register_kind(self, name: str, factory: PayloadFactory) -> None:
        """Register *factory* under *name*. Twice for one name is fatal."""
        self._assert_writable(f"kind {name!r}")
        if not KIND_PATTERN.fullmatch(name):
            raise ContractViolation(f"kind name {name!r} must be lowercase letters only")
        if name in self._kinds:
            raise ContractViolation(f"kind {name!r} is already registered")
        try:
            factory()
        except Exception as e:
            raise ContractViolation(f"kind {name!r} cannot be instantiated without arguments") from e
        self._kinds[name] = factory
        logger.debug("kind_registered", kind=name, factory=getattr(factory, "__name__", repr(factory)))

    def register_paternity(self, parent: str, child: str) -> None:
        """Allow *child* directly under *parent* (``""`` for root)."""
        self._assert_writable(f"paternity {parent!r} -> {child!r}")
        self._children.setdefault(parent, set()).add(child)
        logger.debug("paternity_registered", parent=parent or "<root>", child=child)

    def check_integrity(self) -> None:
        """Every paternity edge must name registered kinds."""
        for parent, children in self._children.items():
            if parent != ROOT and parent not in self._kinds:
                raise ContractViolation(f"parent kind {parent!r} is not registered")
            for child in children:
                if child not in self._kinds:
                    raise ContractViolation(f"child kind {child!r} is not registered")

    def seal(self) -> None:
        if self._sealed:
            return
        self.check_integrity()
        self._sealed = True
        logger.info("kind_registry_sealed", kinds=len(self._kinds), edges=sum(map(len, self._children.values())))

    # -- Lookups ------------------------------------------------------------

    def is_registered(self, name: str) -> bool:
        return name in self._kinds

    def kinds(self) -> list[str]:
        return sorted(self._kinds)

    def children_of(self, parent: str) -> list[str]:
        return sorted(self._children.get(parent, ()))

    def instantiate(self, name: str) -> Payload:
        """Fresh, zero-valued payload of the kind registered as *name*."""
        factory = self._kinds.get(name)
        if factory is None:
            raise ModelNotRegisteredError(hint=f"kind {name!r} is not registered")
        return factory()

    def validate_paternity(self, parent: str, child: str) -> None:
        if child not in self._children.get(parent, ()):
            raise InvalidHierarchyError(
                hint=f"[{parent}] kind doesn't accept the paternity of [{child}] kids",
            )

    def validate_key_chain(self, key: Key) -> None:
        """Check every adjacent pair, the root edge, and non-leaf ids.

        Walks leaf to root. A non-leaf segment with a zero or absent id is
        an invalid path; a disallowed edge is an invalid hierarchy.
        """
        segments = key.segments
        for level in range(len(segments) - 1, -1, -1):
            segment = segments[level]
            if level != len(segments) - 1 and not segment.id:
                raise InvalidPathError(hint=f"key id {segment.id} at level {level}")
            parent_kind = segments[level - 1].kind if level > 0 else ROOT
            self.validate_paternity(parent_kind, segment.kind)


# =============================================================================
# DEFAULT REGISTRY
# =============================================================================

_default_registry = KindRegistry()


def get_registry() -> KindRegistry:
    return _default_registry


def reset_registry() -> KindRegistry:
    """Replace the default registry with an empty one (for testing)."""
    global _default_registry
    _default_registry = KindRegistry()
    return _default_registry


def register_kind(
    name: str,
    *,
    registry: KindRegistry | None = None,
    parents: Iterable[str] = (),
) -> Callable[[type[Payload]], type[Payload]]:
    """Class decorator registering a payload class as kind *name*.

    ``parents`` registers paternity edges at the same time (``""`` for root).
    """

    def decorator(cls: type[Payload]) -> type[Payload]:
        target = registry or get_registry()
        target.register_kind(name, cls)
        for parent in parents:
            target.register_paternity(parent, name)
        return cls

    return decorator


def register_paternity(parent: str, child: str, *, registry: KindRegistry | None = None) -> None:
    (registry or get_registry()).register_paternity(parent, child)


def load_models(modules: Iterable[str], registry: KindRegistry | None = None) -> KindRegistry:
    """Import each models module (registering its kinds), then seal."""
    target = registry or get_registry()
    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise ConfigError(f"cannot import models module {module!r}: {e}") from e
        logger.debug("models_module_loaded", module=module)
    target.seal()
    return target


__all__ = [
    "ROOT",
    "KindRegistry",
    "PayloadFactory",
    "get_registry",
    "reset_registry",
    "register_kind",
    "register_paternity",
    "load_models",
]
