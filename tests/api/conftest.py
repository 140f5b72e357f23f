"""Fixtures for API tests: an app over a fresh in-memory store."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from burrow.api.app import create_app
from burrow.api.settings import BurrowAPISettings
from burrow.storage.memory import MemoryStorage
from tests._support.kinds import build_registry


@pytest.fixture
def api_settings() -> BurrowAPISettings:
    return BurrowAPISettings(_env_file=None, default_page_size=20, max_page_size=100, check_ancestors=True)


@pytest.fixture
def app(api_settings: BurrowAPISettings, memory_storage: MemoryStorage) -> FastAPI:
    return create_app(settings=api_settings, registry=build_registry(), storage=memory_storage)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as client:
        yield client
