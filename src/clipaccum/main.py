"""CLI handling for clipaccum.

This module provides the command-line interface for clipaccum, handling
argument parsing via click, logging configuration, and dispatching to the
daemon or to a one-shot control command.

Usage:
    clipaccum --daemon --socket PATH [--backend auto|x11|macos]
              [--newline/--no-newline] [--clear-on-paste] [--disabled]
              [--paste-hotkey/--no-paste-hotkey] [--verbose]
    clipaccum --command TEXT --socket PATH [--verbose]
"""

import asyncio
import sys

import click

from clipaccum.clipboard_resource import BACKENDS
from clipaccum.main_logging import configure_logging
from clipaccum.main_options import ExclusiveOption


@click.command()
@click.option(
    "--daemon",
    is_flag=True,
    cls=ExclusiveOption,
    excludes=["command"],
    help="Run the accumulator daemon",
)
@click.option(
    "--command",
    "command",
    metavar="TEXT",
    cls=ExclusiveOption,
    excludes=["daemon"],
    help="Send a control command to a running daemon "
    "(enable, disable, clear, paste, status, quit, newline on|off, clear-on-paste on|off)",
)
@click.option(
    "--socket",
    required=True,
    type=click.Path(),
    help="Unix domain socket path for control commands",
)
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default="auto",
    show_default=True,
    help="Clipboard backend",
)
@click.option(
    "--newline/--no-newline",
    default=True,
    show_default=True,
    help="Separate accumulated copies with a newline",
)
@click.option(
    "--clear-on-paste",
    is_flag=True,
    help="Clear the buffer and clipboard shortly after each paste",
)
@click.option(
    "--disabled",
    is_flag=True,
    help="Start with accumulation turned off",
)
@click.option(
    "--paste-hotkey/--no-paste-hotkey",
    default=True,
    show_default=True,
    help="Listen for the global paste shortcut",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    daemon: bool,
    command: str | None,
    socket: str,
    backend: str,
    newline: bool,
    clear_on_paste: bool,
    disabled: bool,
    paste_hotkey: bool,
    verbose: bool,
) -> None:
    """Accumulate successive clipboard copies into one growing buffer."""
    if not daemon and command is None:
        raise click.UsageError("Either --daemon or --command must be specified")

    configure_logging(verbose)

    if daemon:
        _run_daemon(socket, backend, newline, clear_on_paste, disabled, paste_hotkey)
    else:
        _run_command(socket, command)


def _run_daemon(
    socket: str,
    backend: str,
    newline: bool,
    clear_on_paste: bool,
    disabled: bool,
    paste_hotkey: bool,
) -> None:
    """Run the daemon until SIGINT or SIGTERM.

    Args:
        socket: Path to the control socket.
        backend: Clipboard backend name.
        newline: Initial insert-newline flag.
        clear_on_paste: Initial clear-on-paste flag.
        disabled: Start with accumulation off.
        paste_hotkey: Whether to listen for the paste shortcut.
    """
    from clipaccum.accumulator_state import AccumulatorState
    from clipaccum.service import run_daemon

    state = AccumulatorState(
        enabled=not disabled,
        clear_on_paste=clear_on_paste,
        insert_newline=newline,
    )
    asyncio.run(run_daemon(backend, socket, state, paste_hotkey))


def _run_command(socket: str, command: str) -> None:
    """Send one control command and print the response.

    Args:
        socket: Path to the control socket.
        command: Command text.
    """
    from clipaccum.control import is_error
    from clipaccum.control_client import send_command
    from clipaccum.protocol import ProtocolError

    try:
        response = asyncio.run(send_command(socket, command))
    except (ProtocolError, ConnectionError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if is_error(response):
        click.echo(response, err=True)
        sys.exit(1)
    click.echo(response)
