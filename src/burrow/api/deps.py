"""
FastAPI dependency injection: shared singletons.

Usage in routers::

    from burrow.api.deps import Engine

    @router.get("/{path:path}")
    async def read(path: str, engine: Engine):
        ...

The engine, registry and storage live on ``app.state`` (built by
:func:`~burrow.api.app.create_app`); settings are an ``lru_cache`` singleton
overridden by the app factory.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from burrow.api.settings import BurrowAPISettings
from burrow.engine.actions import ActionEngine


@lru_cache(maxsize=1)
def get_settings() -> BurrowAPISettings:
    """Cached settings: loaded once per process."""
    return BurrowAPISettings()


def get_engine(request: Request) -> ActionEngine:
    return request.app.state.engine


Settings = Annotated[BurrowAPISettings, Depends(get_settings)]
Engine = Annotated[ActionEngine, Depends(get_engine)]
