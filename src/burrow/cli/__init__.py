"""burrow command-line interface (Typer)."""

from burrow.cli.app import app

__all__ = ["app"]
