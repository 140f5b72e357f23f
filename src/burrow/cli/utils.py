"""
CLI utility helpers: consoles, error printing and registry loading.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from burrow.core.errors import BurrowError, ConfigError, ContractViolation
from burrow.core.registry import KindRegistry, load_models
from burrow.core.settings import BurrowSettings

console = Console()
err_console = Console(stderr=True)


def print_error(error: BurrowError) -> None:
    """Print ``kind: description. hint`` on stderr."""
    err_console.print(f"[bold red]{error.kind.value}[/bold red]: {escape(error.description)}. {escape(error.hint)}")


def load_registry(models: list[str] | None) -> KindRegistry:
    """Import *models* (or ``BURROW_MODELS``) into the default registry and seal it."""
    modules = models if models else BurrowSettings().models
    try:
        return load_models(modules)
    except (ConfigError, ContractViolation) as e:
        err_console.print(f"[bold red]Error[/bold red]: {escape(str(e))}")
        raise typer.Exit(code=1) from e
