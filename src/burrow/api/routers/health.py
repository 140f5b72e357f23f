"""Health endpoint: liveness plus the registered kinds.

Mounted at ``/_health``: the underscore keeps it outside the resource path
grammar, so it never shadows a kind.
"""

from __future__ import annotations

from fastapi import APIRouter

from burrow.api.deps import Engine, Settings
from burrow.api.schemas.common import HealthBody

router = APIRouter()


@router.get("/_health", response_model=HealthBody)
async def health(engine: Engine, settings: Settings) -> HealthBody:
    return HealthBody(
        version=settings.api_version,
        storage=type(engine.storage).__name__,
        kinds=engine.registry.kinds(),
    )
