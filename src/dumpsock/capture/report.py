"""Terminal report step — emits the capture or the diagnostic."""

from __future__ import annotations

import logging
from typing import BinaryIO

from rich.console import Console
from rich.markup import escape

from dumpsock.capture.models import Active, CaptureState

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def report(state: CaptureState, stdout: BinaryIO, console: Console) -> int:
    """Finalize a capture run and return the process exit status.

    Active: the whole buffer goes to ``stdout`` untouched and the drain stats
    to the console. Failed: only the diagnostic goes to the console; stdout
    is left empty. Resources still held are released either way.
    """
    try:
        if isinstance(state, Active):
            stdout.write(state.buffer.view())
            stdout.flush()
            if state.stats is not None:
                console.print(state.stats.summary(), highlight=False, soft_wrap=True)
                logger.debug(
                    "Throughput: %.0f B/s, %.2f KiB/s, %.2f MiB/s",
                    state.stats.bytes_per_second,
                    state.stats.kib_per_second,
                    state.stats.mib_per_second,
                )
            return EXIT_SUCCESS

        if state.partial:
            logger.debug(
                "Discarding %d bytes received before the error", len(state.partial)
            )
        console.print(
            f"[red]{escape(state.message)}[/red]", highlight=False, soft_wrap=True
        )
        return EXIT_FAILURE
    finally:
        state.release()
