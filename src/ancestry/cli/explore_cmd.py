"""Provenance commands - fetch parents and explore ancestry trees.

    ancestry parents d9-0-4-100000000000000
    ancestry explore d9-0-4-100000000000000 --depth 3
"""

from __future__ import annotations

import asyncio
import json

import click
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ancestry.cli.helpers import console, parse_handle_argument, print_error
from ancestry.config import get_config
from ancestry.foundation.errors import TransportError
from ancestry.graph import AncestorGraph
from ancestry.handle import Handle
from ancestry.session import ExplorationSession, FetchOutcome
from ancestry.transport import OrchestratorClient, Parents


def _make_client(url: str | None) -> OrchestratorClient:
    config = get_config()
    return OrchestratorClient(
        url or config.server.url,
        timeout=config.server.timeout,
        connect_timeout=config.server.connect_timeout,
    )


@click.command("parents")
@click.argument("handle")
@click.option("--url", "-u", default=None, help="Orchestrator address (default: server.url)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def parents_cmd(handle: str, url: str | None, json_output: bool) -> None:
    """Fetch the direct parents of a handle.

    \b
    Examples:
        ancestry parents d9-0-4-100000000000000
        ancestry parents d9-0-4-100000000000000 --url build-host:9090 --json
    """
    target = parse_handle_argument(handle)

    async def fetch() -> Parents:
        async with _make_client(url) as client:
            return await client.get_parents(target)

    try:
        parents = asyncio.run(fetch())
    except TransportError as e:
        print_error(e)
        raise click.exceptions.Exit(1) from e

    if json_output:
        tasks = None if parents.tasks is None else [
            {"handle": t.handle.to_hex(), "operation": t.operation.label} for t in parents.tasks
        ]
        print(json.dumps({"handle": target.to_hex(), "parents": tasks}, indent=2))
        return

    if parents.tasks is None:
        console.print(f"[yellow]No known parents for {target}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=4)
    table.add_column("Operation", width=10)
    table.add_column("Handle")
    table.add_column("Summary", style="dim")
    for i, task in enumerate(parents.tasks):
        op = task.operation
        table.add_row(str(i), f"[{op.color}]{op.label}[/{op.color}]", task.handle.to_hex(),
                      escape(task.handle.describe()))
    console.print(table)


@click.command("explore")
@click.argument("handle", required=False)
@click.option("--url", "-u", default=None, help="Orchestrator address (default: server.url)")
@click.option("--depth", "-d", type=click.IntRange(min=0), default=None,
              help="Generations to fetch (default: explore.max_depth)")
@click.option("--layout", is_flag=True, help="Also show the computed draw parameters")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def explore_cmd(
    handle: str | None,
    url: str | None,
    depth: int | None,
    layout: bool,
    json_output: bool,
) -> None:
    """Reveal the ancestry tree of a handle, generation by generation.

    Without HANDLE, explores explore.default_target from the config.

    \b
    Examples:
        ancestry explore d9-0-4-100000000000000
        ancestry explore d9-0-4-100000000000000 --depth 5 --layout
    """
    config = get_config()
    root = parse_handle_argument(handle or config.explore.default_target)
    depth = config.explore.max_depth if depth is None else depth

    async def run() -> tuple[AncestorGraph, list[FetchOutcome]]:
        async with _make_client(url) as client:
            session = ExplorationSession(client)
            outcomes = await session.explore(root, depth=depth)
            graph = session.view.graph
            if graph is None:
                raise RuntimeError(f"Exploring {root} left no main handle")
            return graph, outcomes

    graph, outcomes = asyncio.run(run())
    errors = [o.error for o in outcomes if o.error is not None]

    if json_output:
        print(json.dumps(_graph_to_dict(graph, errors), indent=2))
        return

    console.print(_build_tree(graph))
    if layout:
        console.print(_layout_table(graph))
    console.print(f"\n[dim]{len(graph)} handles known after {depth} generation(s)[/dim]")
    for error in errors:
        print_error(error)
    if errors and len(graph) == 1:
        raise click.exceptions.Exit(1)


def _label(graph: AncestorGraph, index: int) -> str:
    handle: Handle = graph.element(index).handle
    return f"[bold]#{index}[/bold] {handle.to_hex()} [dim]{escape(handle.describe())}[/dim]"


def _build_tree(graph: AncestorGraph) -> Tree:
    """Rich tree with the main handle at the top and parents as branches."""
    tree = Tree(_label(graph, 0))

    def add_parents(branch: Tree, index: int) -> None:
        for parent in graph.parents_of(index):
            # A node's first back-edge always points at the node that owns it
            edges = graph.back_edges(parent)
            op = edges[0][1]
            text = f"[{op.color}]{op.label}[/{op.color}] {_label(graph, parent)}"
            extra = [f"#{child} {o.label}" for child, o in edges[1:]]
            if extra:
                text += f" [dim](also feeds {', '.join(extra)})[/dim]"
            add_parents(branch.add(text), parent)

    add_parents(tree, 0)
    return tree


def _layout_table(graph: AncestorGraph) -> Table:
    table = Table(show_header=True, header_style="bold", title="Layout")
    table.add_column("#", style="dim", width=4)
    table.add_column("Lineage")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Scale", justify="right")
    for index in range(len(graph)):
        params = graph.get_draw_parameters(index)
        table.add_row(
            str(index),
            ".".join(str(i) for i in graph.lineage_of(index)),
            f"{params.position.x:.4f}",
            f"{params.position.y:.4f}",
            f"{params.scale:.4f}",
        )
    return table


def _graph_to_dict(graph: AncestorGraph, errors: list[TransportError]) -> dict:
    nodes = []
    for index in range(len(graph)):
        params = graph.get_draw_parameters(index)
        nodes.append({
            "index": index,
            "handle": graph.element(index).handle.to_hex(),
            "lineage": list(graph.lineage_of(index)),
            "parents": graph.parents_of(index),
            "children": [
                {"index": child, "operation": op.label} for child, op in graph.back_edges(index)
            ],
            "position": [params.position.x, params.position.y],
            "scale": params.scale,
        })
    return {
        "ordering": [h.to_hex() for h in graph.ordering],
        "nodes": nodes,
        "errors": [e.to_dict() for e in errors],
    }
