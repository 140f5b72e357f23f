"""
CLI: ``burrow serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from burrow.api.settings import BurrowAPISettings
from burrow.cli.utils import console


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default BURROW_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default BURROW_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the burrow REST API server."""
    settings = BurrowAPISettings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting burrow API[/bold green] on {host}:{port} ({settings.storage_url})")
    uvicorn.run(
        "burrow.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
