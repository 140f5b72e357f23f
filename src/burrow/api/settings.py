"""
API-specific settings.

Extends :class:`~burrow.core.settings.BurrowSettings` with parameters that
govern the REST transport (bind address, prefix, OpenAPI metadata, CORS).
All values can be overridden via ``BURROW_`` environment variables.
"""

from __future__ import annotations

from pydantic import Field

from burrow.core.settings import BurrowSettings


class BurrowAPISettings(BurrowSettings):
    """Settings for the burrow REST API.

    Order of precedence (highest → lowest):
        1. Environment variables (``BURROW_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    debug: bool = Field(default=False, description="Expose exception text in 500 responses")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="", description="URL prefix for resource paths")
    api_title: str = Field(default="burrow", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
