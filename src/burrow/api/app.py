"""
FastAPI application factory.

``create_app()`` wires settings, the kind registry, storage, the action
engine, middleware, routers and error handlers into a single ``FastAPI``
instance.

Manifesto:
    The app factory is the single composition root: all middleware,
    routers, and lifecycle hooks are wired here so the rest of the
    codebase never touches ``FastAPI`` directly.

Tags:
    burrow, api, app-factory, composition-root, FastAPI
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from burrow.api.deps import get_settings
from burrow.api.middleware.errors import unhandled_exception_handler
from burrow.api.middleware.request_context import RequestContextMiddleware
from burrow.api.settings import BurrowAPISettings
from burrow.core.logging import configure_logging, get_logger
from burrow.core.registry import KindRegistry, load_models
from burrow.engine.actions import ActionEngine
from burrow.storage import StorageBackend, create_storage


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup / shutdown hooks."""
    log = get_logger("burrow.api")
    engine: ActionEngine = app.state.engine
    log.info("burrow_api_starting", version=app.version, storage=type(engine.storage).__name__)
    yield
    if app.state.owns_storage:
        engine.storage.close()
    log.info("burrow_api_stopped")


def create_app(
    settings: BurrowAPISettings | None = None,
    *,
    registry: KindRegistry | None = None,
    storage: StorageBackend | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : BurrowAPISettings | None
        Override settings (useful for testing). When ``None`` the cached
        singleton from :func:`get_settings` is used.
    registry : KindRegistry | None
        Kind registry to serve. When ``None`` the modules listed in
        ``settings.models`` are imported into the default registry.
    storage : StorageBackend | None
        Storage backend. When ``None`` one is built from
        ``settings.storage_url`` and closed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json, service="burrow-api")

    if registry is None:
        registry = load_models(settings.models)
    else:
        registry.seal()
    owns_storage = storage is None
    if storage is None:
        storage = create_storage(settings.storage_url)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/_docs",
        redoc_url=None,
        openapi_url=f"{settings.api_prefix}/_openapi.json",
    )

    # Stash shared state for dependencies and middleware
    app.state.settings = settings
    app.state.engine = ActionEngine(storage, registry, settings)
    app.state.owns_storage = owns_storage

    # Override DI so endpoints use the provided settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from burrow.api.routers import health, resources

    app.include_router(health.router, tags=["health"])
    app.include_router(resources.router, prefix=settings.api_prefix, tags=["resources"])

    return app
