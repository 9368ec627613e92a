"""CLI: tracewire send-test"""

import click
from rich.console import Console

from tracewire.hub import Hub
from tracewire.options import Options

console = Console()


@click.command("send-test")
@click.option("--dsn", envvar="TRACEWIRE_DSN", required=True, help="Project DSN")
@click.option("--message", default="tracewire test event")
@click.option("--timeout", "timeout_millis", default=5000, type=int, help="Flush timeout in ms")
def send_test_cmd(dsn, message, timeout_millis):
    """Capture one event and wait for it to be delivered."""
    try:
        options = Options(dsn=dsn, integrations=[])
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    hub = Hub(options)
    try:
        with console.status("Sending test event..."):
            event_id = hub.capture_message(message)
            delivered = hub.flush(timeout_millis)
    finally:
        hub.close(timeout_millis=0)

    if event_id is None:
        console.print("[red]Event was dropped before sending.[/red]")
        raise SystemExit(1)
    if delivered:
        console.print(f"[green]Event {event_id} flushed.[/green]")
    else:
        console.print(f"[yellow]Event {event_id} queued, flush timed out after {timeout_millis}ms.[/yellow]")
