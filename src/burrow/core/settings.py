"""Engine settings shared by the HTTP adapter and the CLI.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    Page-size limits, the ancestry policy and the storage location are read
    once at startup; nothing in the engine reads the environment itself.

    - **Pydantic validation:** Type-checked at startup, not on first request
    - **Environment-driven:** ``BURROW_`` env vars and a ``.env`` file
    - **Sensible defaults:** In-memory storage, 20 rows per page, max 100

Examples:
    >>> settings = BurrowSettings(max_page_size=50)
    >>> settings.default_page_size
    20

Tags:
    settings, configuration, pydantic, environment, burrow-core
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BurrowSettings(BaseSettings):
    """Settings for the resource engine.

    Fields
    ──────
    default_page_size : Rows per list page when the caller gives none (or an invalid one)
    max_page_size     : Upper clamp for the requested page size
    check_ancestors   : Verify ancestors exist in storage before create
    request_timeout   : Deadline per unit of work in seconds (None = no deadline)
    storage_url       : ``memory://``, ``sqlite://`` or ``sqlite:///path.db``
    models            : Importable modules that register kinds
    log_level         : Structlog log level
    log_json          : Force JSON (True) or console (False) logs; None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="BURROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Pagination ───────────────────────────────────────────────
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # ── Actions ──────────────────────────────────────────────────
    check_ancestors: bool = True
    request_timeout: float | None = Field(default=None, gt=0)

    # ── Storage / models ─────────────────────────────────────────
    storage_url: str = "memory://"
    models: list[str] = Field(default_factory=list)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @model_validator(mode="after")
    def _default_within_max(self) -> BurrowSettings:
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self


@lru_cache(maxsize=1)
def get_settings() -> BurrowSettings:
    """Cached settings, loaded once per process."""
    return BurrowSettings()


__all__ = ["BurrowSettings", "get_settings"]
