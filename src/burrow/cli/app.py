"""
Root Typer application for the burrow CLI.
"""

from __future__ import annotations

import sys

import typer
from typer import Typer

from burrow import __version__
from burrow.cli.inspect import kinds, path
from burrow.cli.serve import serve
from burrow.core.logging import configure_logging
from burrow.core.settings import BurrowSettings

app = Typer(
    name="burrow",
    help="burrow: hierarchical resource engine.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"burrow {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """burrow CLI: serve the API and inspect kinds and paths."""
    # stdout carries command output (tables, --json); events go to stderr.
    settings = BurrowSettings()
    configure_logging(level=settings.log_level, json_format=settings.log_json, service="burrow-cli", stream=sys.stderr)


app.command("serve")(serve)
app.command("kinds")(kinds)
app.command("path")(path)
