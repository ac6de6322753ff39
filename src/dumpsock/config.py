"""Capture configuration — fixed listener address and buffer sizing."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PORT = 9999
TRANSFER_CHUNK_SIZE = 4096
CAPACITY_HINT = 1024 * 1024  # 1 MiB


@dataclass(frozen=True)
class DumpConfig:
    """Parameters of a capture run.

    The CLI always uses the defaults; nothing here is read from the
    environment or the command line.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    backlog: int = 1
    chunk_size: int = TRANSFER_CHUNK_SIZE
    capacity_hint: int = CAPACITY_HINT

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)
