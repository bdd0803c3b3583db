"""Handle commands - inspect and build handle text.

    ancestry decode d9-0-4-100000000000000
    ancestry encode --local 217 --type thunk --size 4
    ancestry literal "hi"
"""

from __future__ import annotations

import json

import click
from rich.markup import escape
from rich.table import Table

from ancestry.cli.helpers import console, parse_handle_argument
from ancestry.handle import (
    CANONICAL_HASH_LENGTH,
    Accessibility,
    Canonical,
    Handle,
    LiteralContent,
    Local,
    ObjectType,
    OtherContent,
    encode,
)

_ACCESSIBILITY_CHOICES = [a.name.lower() for a in Accessibility]
_OBJECT_TYPE_CHOICES = [t.name.lower() for t in ObjectType]


def handle_to_dict(handle: Handle) -> dict:
    """JSON-friendly view of a handle."""
    data: dict = {
        "hex": encode(handle),
        "size": handle.size,
        "accessibility": handle.accessibility.name.lower(),
    }
    content = handle.content
    if isinstance(content, LiteralContent):
        data["kind"] = "literal"
        data["literal"] = content.data[: handle.size].hex()
        return data

    data["object_type"] = content.object_type.name.lower()
    ref = content.data
    if isinstance(ref, Canonical):
        data["kind"] = "canonical"
        data["hash"] = ref.hash.hex()
    else:
        data["kind"] = "local"
        data["local_id"] = ref.id
    return data


@click.command("decode")
@click.argument("handle")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def decode_cmd(handle: str, json_output: bool) -> None:
    """Show the fields packed into a handle.

    \b
    Examples:
        ancestry decode 10-0-0-2400000000000000
        ancestry decode 862fcba5ecaade2c-4b24159ac7c28a29-3-715eb1e41f37d42 --json
    """
    parsed = parse_handle_argument(handle)
    data = handle_to_dict(parsed)

    if json_output:
        print(json.dumps(data, indent=2))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Handle", data["hex"])
    table.add_row("Summary", parsed.describe())
    table.add_row("Kind", data["kind"])
    table.add_row("Accessibility", data["accessibility"])
    table.add_row("Size", str(data["size"]))
    if "object_type" in data:
        table.add_row("Object type", data["object_type"])
    if "literal" in data:
        literal = parsed.get_literal_content() or b""
        table.add_row("Literal", f"{data['literal'] or '-'}  {escape(repr(literal))}")
    if "hash" in data:
        table.add_row("Hash", data["hash"])
    if "local_id" in data:
        table.add_row("Local id", str(data["local_id"]))
    console.print(table)


@click.command("encode")
@click.option("--local", "local_id", type=int, help="Process-local id")
@click.option("--canonical", "hash_hex", help=f"Content hash, {CANONICAL_HASH_LENGTH} bytes as hex")
@click.option("--type", "object_type", type=click.Choice(_OBJECT_TYPE_CHOICES), default="blob",
              show_default=True, help="Object type")
@click.option("--size", type=int, default=0, show_default=True, help="Object size")
@click.option("--accessibility", type=click.Choice(_ACCESSIBILITY_CHOICES), default="strict",
              show_default=True, help="Accessibility")
def encode_cmd(
    local_id: int | None,
    hash_hex: str | None,
    object_type: str,
    size: int,
    accessibility: str,
) -> None:
    """Build the text form of a non-literal handle.

    \b
    Examples:
        ancestry encode --local 217 --type thunk --size 4
        ancestry encode --canonical 2cdeaaeca5cb2f86... --type tag --size 3
    """
    if (local_id is None) == (hash_hex is None):
        raise click.UsageError("Give exactly one of --local or --canonical")

    try:
        if hash_hex is not None:
            data: Canonical | Local = Canonical(bytes.fromhex(hash_hex))
        else:
            data = Local(local_id)
        handle = Handle(
            size=size,
            accessibility=Accessibility[accessibility.upper()],
            content=OtherContent(object_type=ObjectType[object_type.upper()], data=data),
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    print(encode(handle))


@click.command("literal")
@click.argument("value")
@click.option("--hex", "is_hex", is_flag=True, help="VALUE is hex bytes rather than text")
@click.option("--accessibility", type=click.Choice(_ACCESSIBILITY_CHOICES), default="strict",
              show_default=True, help="Accessibility")
def literal_cmd(value: str, is_hex: bool, accessibility: str) -> None:
    """Build the text form of a literal handle holding VALUE.

    \b
    Examples:
        ancestry literal hello
        ancestry literal --hex 10000000
    """
    try:
        data = bytes.fromhex(value) if is_hex else value.encode()
        handle = Handle.literal(data, Accessibility[accessibility.upper()])
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="VALUE") from e

    print(encode(handle))
