"""Capture state models — the Active/Failed union threaded through the pipeline."""

from __future__ import annotations

import enum
import socket
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Union

from dumpsock.capture.buffer import CaptureBuffer
from dumpsock.capture.subsystem import NetworkSubsystem


class CaptureStep(enum.Enum):
    """Pipeline steps, in execution order."""

    INIT = "init"
    CREATE_SOCKET = "create_socket"
    BIND = "bind"
    LISTEN = "listen"
    ACCEPT = "accept"
    DRAIN = "drain"
    REPORT = "report"


@dataclass(frozen=True)
class DrainStats:
    """Wall-clock timing of a completed drain."""

    byte_count: int
    elapsed: float

    @property
    def bytes_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.byte_count / self.elapsed

    @property
    def kib_per_second(self) -> float:
        return self.bytes_per_second / 1024

    @property
    def mib_per_second(self) -> float:
        return self.kib_per_second / 1024

    def summary(self) -> str:
        return (
            f"{self.byte_count} bytes in {self.elapsed:g}s "
            f"for {self.mib_per_second:g} MiB/s"
        )


@dataclass
class Active:
    """Live capture: every resource acquired so far plus the received bytes.

    All sockets and the subsystem handle are registered on ``resources`` and
    released together, in reverse order of acquisition.
    """

    buffer: CaptureBuffer
    resources: ExitStack = field(default_factory=ExitStack)
    subsystem: NetworkSubsystem | None = None
    listener: socket.socket | None = None
    address: tuple[str, int] | None = None
    connection: socket.socket | None = None
    peer: tuple[str, int] | None = None
    stats: DrainStats | None = None

    def release(self) -> None:
        self.resources.close()


@dataclass(frozen=True)
class Failed:
    """Terminal error state. Never transitions back to Active."""

    step: CaptureStep
    message: str
    partial: bytes = b""

    def release(self) -> None:
        """Nothing left to release; resources were closed on failure."""


CaptureState = Union[Active, Failed]
