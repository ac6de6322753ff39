"""Process-wide networking subsystem handle.

On Windows the interpreter performs WSAStartup itself when the socket module
is imported, so startup here only verifies that the IPv4 stream stack can
resolve a passive (wildcard) address. The handle is still modelled as a scoped
resource so the pipeline acquires and releases it exactly once.
"""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)


class NetworkSubsystem:
    """Scoped handle on the host networking stack."""

    def __init__(self) -> None:
        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    def startup(self) -> None:
        """Bring the subsystem up.

        Raises OSError (usually ``socket.gaierror``) when the IPv4 stream
        stack is unavailable.
        """
        socket.getaddrinfo(
            None, 0, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
        )
        self._started = True
        logger.debug("Network subsystem started")

    def shutdown(self) -> None:
        if not self._started:
            return
        self._started = False
        logger.debug("Network subsystem released")

    def __enter__(self) -> NetworkSubsystem:
        self.startup()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
