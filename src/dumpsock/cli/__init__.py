"""CLI entry point — dumpsock listens on port 9999 and dumps one stream to stdout."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console

from dumpsock import __version__
from dumpsock.capture import run_capture
from dumpsock.config import DumpConfig

logger = logging.getLogger(__name__)
console = Console(stderr=True)

EXIT_INTERRUPTED = 130


@click.command()
@click.version_option(version=__version__, prog_name="dumpsock")
@click.option("--verbose", "-v", is_flag=True, help="Log each pipeline step to stderr.")
def main(verbose: bool) -> None:
    """dumpsock — accept one TCP connection on 0.0.0.0:9999 and write
    everything the peer sends to stdout.

    Timing and errors are reported on stderr; stdout carries only the
    captured bytes.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = DumpConfig()
    stdout = sys.stdout.buffer

    def on_listening(address: tuple[str, int]) -> None:
        logger.info("Waiting for a connection on %s:%d", *address)

    try:
        rc = run_capture(config, stdout, console, on_listening=on_listening)
    except KeyboardInterrupt:
        console.print("[dim]Interrupted[/dim]")
        sys.exit(EXIT_INTERRUPTED)
    sys.exit(rc)
