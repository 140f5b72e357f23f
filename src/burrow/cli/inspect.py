"""
CLI: ``burrow kinds`` and ``burrow path``: registry and path inspection.
"""

from __future__ import annotations

import json

import typer
from rich.table import Table

from burrow.cli.utils import console, load_registry, print_error
from burrow.core.errors import BurrowError, InvalidPathError
from burrow.core.keys import format_path, parse_path
from burrow.core.registry import ROOT


def kinds(
    models: list[str] | None = typer.Option(None, "--models", "-m", help="Models module to import (repeatable)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List registered kinds and the kinds allowed under each."""
    registry = load_registry(models)
    rows = [
        {
            "kind": kind,
            "root": kind in registry.children_of(ROOT),
            "children": registry.children_of(kind),
        }
        for kind in registry.kinds()
    ]

    if as_json:
        console.print_json(json.dumps(rows))
        return
    if not rows:
        console.print("[dim]No kinds registered.[/dim]")
        return

    table = Table(title="Kinds", show_header=True, header_style="bold cyan")
    table.add_column("Kind")
    table.add_column("Root", justify="center")
    table.add_column("Children")
    for row in rows:
        table.add_row(row["kind"], "yes" if row["root"] else "", ", ".join(row["children"]))
    console.print(table)


def path(
    value: str = typer.Argument(..., help="Resource path, e.g. /account/1/order"),
    models: list[str] | None = typer.Option(None, "--models", "-m", help="Models module to import (repeatable)"),
    check: bool = typer.Option(True, "--check/--no-check", help="Validate paternity against the registry"),
) -> None:
    """Parse a path, print its segments and validate its chain."""
    try:
        key = parse_path(value)
    except InvalidPathError as e:
        print_error(e)
        raise typer.Exit(code=1) from e

    table = Table(title=format_path(key), show_header=True, header_style="bold cyan")
    table.add_column("Level", justify="right")
    table.add_column("Kind")
    table.add_column("Id", justify="right")
    for level, segment in enumerate(key.segments):
        table.add_row(str(level), segment.kind, "" if segment.id is None else str(segment.id))
    console.print(table)
    console.print("complete" if key.is_complete else "incomplete (id assigned on create)")

    if not check:
        return
    registry = load_registry(models)
    try:
        registry.validate_key_chain(key)
    except BurrowError as e:
        print_error(e)
        raise typer.Exit(code=1) from e
    console.print("[green]chain ok[/green]")
