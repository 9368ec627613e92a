"""
tracewire CLI — `tracewire` command.

Commands:
  tracewire inspect <file>     Show the items of an envelope file
  tracewire send-test          Capture one event and flush it
"""

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install tracewire[cli]")

from tracewire.consts import VERSION

console = Console()


@click.group()
@click.version_option(VERSION)
def main():
    """tracewire CLI — inspect envelopes and check delivery."""


# Register subcommands from separate modules
from tracewire.cli.envelope import inspect_cmd
from tracewire.cli.send import send_test_cmd

main.add_command(inspect_cmd)
main.add_command(send_test_cmd)


if __name__ == "__main__":
    main()
