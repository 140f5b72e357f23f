"""
Shared pytest fixtures and configuration for burrow tests.

This module provides:
- A sealed sample KindRegistry (accounts / orders / items)
- Hook-call recording reset between tests
- Memory and SQLite storage backends
- An ActionEngine wired to them
- Default-registry isolation for load_models / CLI tests

Usage:
    def test_something(engine, storage):
        ...
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from burrow.core.registry import KindRegistry, reset_registry
from burrow.core.settings import BurrowSettings
from burrow.engine.actions import ActionEngine
from burrow.storage.memory import MemoryStorage
from burrow.storage.sqlite import SQLiteStorage
from tests._support.kinds import HOOK_CALLS, build_registry

# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        top = test_path.parts[0] if test_path.parts else ""
        if top in {"api", "cli"}:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def registry() -> KindRegistry:
    """Sealed registry with the sample kinds from tests._support.kinds."""
    return build_registry()


@pytest.fixture
def clean_default_registry() -> Generator[KindRegistry, None, None]:
    """
    Fresh default registry before and after the test.

    Also forgets the sample models module so importing it registers again.
    """
    sys.modules.pop("tests._support.models", None)
    fresh = reset_registry()
    yield fresh
    sys.modules.pop("tests._support.models", None)
    reset_registry()


@pytest.fixture(autouse=True)
def hook_calls() -> Generator[list[tuple[str, str]], None, None]:
    """Recorded (hook, path) pairs, cleared around each test."""
    HOOK_CALLS.clear()
    yield HOOK_CALLS
    HOOK_CALLS.clear()


# =============================================================================
# Storage / Engine Fixtures
# =============================================================================


@pytest.fixture
def settings() -> BurrowSettings:
    return BurrowSettings(_env_file=None, default_page_size=20, max_page_size=100, check_ancestors=True)


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def sqlite_storage(tmp_path: Path) -> Generator[SQLiteStorage, None, None]:
    storage = SQLiteStorage(str(tmp_path / "burrow.db"))
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sqlite"])
def storage(request: pytest.FixtureRequest, tmp_path: Path) -> Generator[MemoryStorage | SQLiteStorage, None, None]:
    """Both reference backends; storage contract tests run against each."""
    if request.param == "memory":
        backend: MemoryStorage | SQLiteStorage = MemoryStorage()
    else:
        backend = SQLiteStorage(str(tmp_path / "contract.db"))
    yield backend
    backend.close()


@pytest.fixture
def engine(memory_storage: MemoryStorage, registry: KindRegistry, settings: BurrowSettings) -> ActionEngine:
    return ActionEngine(memory_storage, registry, settings)
