"""Shared CLI helpers."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from ancestry.foundation.errors import AncestryError
from ancestry.handle import Handle, decode

console = Console()


def print_error(error: AncestryError) -> None:
    """Show an error with its recovery hints."""
    console.print(f"[red]{escape(str(error))}[/red]")
    for hint in error.recovery_hints:
        console.print(f"  [dim]• {escape(hint)}[/dim]")


def parse_handle_argument(text: str) -> Handle:
    """Decode a handle given on the command line, exiting with status 1 if invalid."""
    try:
        return decode(text.strip())
    except AncestryError as e:
        print_error(e)
        raise click.exceptions.Exit(1) from e
