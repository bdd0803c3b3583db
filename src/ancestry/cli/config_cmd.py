"""Config command - Manage Ancestry configuration."""

from __future__ import annotations

import click
from rich.panel import Panel

from ancestry.cli.helpers import console, print_error
from ancestry.config import get_config, load_config, save_default_config
from ancestry.foundation.errors import ConfigError


@click.command()
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--init", is_flag=True, help="Create default config file")
@click.option("--path", type=click.Path(), help="Config file path (default: .ancestry/config.yaml)")
def config(show: bool, init: bool, path: str | None) -> None:
    """Manage Ancestry configuration.

    Configuration is loaded from (in priority order):
    1. Environment variables (ANCESTRY_*)
    2. .ancestry/config.yaml (project-local)
    3. ~/.ancestry/config.yaml (user-global)
    4. Built-in defaults

    Examples:

        ancestry config --show              # Show current config
        ancestry config --init              # Create default config file

    Environment overrides:

        ANCESTRY_SERVER_URL=build-host:9090 ancestry explore ...
    """
    if init:
        config_path = path or ".ancestry/config.yaml"
        saved_path = save_default_config(config_path)
        console.print(f"[green]✓ Config file created:[/green] {saved_path}")
        console.print("\n[dim]Edit this file to customize Ancestry behavior.[/dim]")
        return

    try:
        cfg = load_config(path) if path else get_config()
    except ConfigError as e:
        print_error(e)
        raise click.exceptions.Exit(1) from e

    console.print(Panel("[bold]Ancestry Configuration[/bold]", border_style="cyan"))

    console.print("\n[cyan]Server[/cyan]")
    console.print(f"  URL: {cfg.server.url}")
    console.print(f"  Timeout: {cfg.server.timeout}s")
    console.print(f"  Connect timeout: {cfg.server.connect_timeout}s")

    console.print("\n[cyan]Explore[/cyan]")
    console.print(f"  Default target: {cfg.explore.default_target}")
    console.print(f"  Max depth: {cfg.explore.max_depth}")

    console.print(f"\n[cyan]Debug[/cyan]: {cfg.debug}")
