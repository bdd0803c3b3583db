"""Ancestry CLI."""

from ancestry.cli.main import main

__all__ = ["main"]
