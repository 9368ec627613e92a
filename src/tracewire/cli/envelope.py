"""CLI: tracewire inspect <file>"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from tracewire.envelope import EnvelopeItem, ItemType
from tracewire.serializer import default_serializer

console = Console()


def _summary(item: EnvelopeItem) -> str:
    if item.type == ItemType.EVENT.value:
        event = item.get_event()
        if event is None:
            return "[red]unreadable event[/red]"
        if event.message:
            return event.message
        if event.exception:
            exc = event.exception[0]
            return f"{exc.type}: {exc.value or ''}"
        return ""
    if item.type == ItemType.TRANSACTION.value:
        tx = item.get_transaction()
        if tx is None:
            return "[red]unreadable transaction[/red]"
        duration = f" ({tx.duration * 1000:.1f}ms)" if tx.duration is not None else ""
        return f"{tx.transaction}{duration}, {len(tx.spans)} spans"
    if item.type == ItemType.ATTACHMENT.value:
        return f"{item.header.filename or '-'} ({item.header.content_type or 'unknown'})"
    return ""


@click.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "--json", is_flag=True)
def inspect_cmd(path, json_output):
    """Show the items of an envelope file."""
    envelope = default_serializer.deserialize_envelope(Path(path).read_bytes())
    if envelope is None:
        console.print(f"[red]{path} is not a readable envelope.[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps({
            "header": envelope.header.model_dump(exclude_none=True),
            "items": [item.header.model_dump(exclude_none=True) for item in envelope.items],
        }, indent=2))
        return

    table = Table(title=f"Envelope {envelope.event_id or '-'} ({len(envelope)} items)")
    table.add_column("#", justify="right")
    table.add_column("Type", style="bold")
    table.add_column("Length", justify="right")
    table.add_column("Summary")
    for index, item in enumerate(envelope.items):
        table.add_row(str(index), item.type, str(item.length), _summary(item))
    console.print(table)
