"""Shared test fixtures."""

from __future__ import annotations

import io
import socket
import threading
from collections.abc import Callable, Iterable, Iterator

import pytest
from rich.console import Console

from dumpsock.config import DumpConfig


@pytest.fixture
def loopback_config() -> DumpConfig:
    """Config bound to an ephemeral loopback port."""
    return DumpConfig(host="127.0.0.1", port=0)


@pytest.fixture
def stderr_console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def stdout_sink() -> io.BytesIO:
    return io.BytesIO()


def send_and_close(address: tuple[str, int], chunks: Iterable[bytes]) -> None:
    """Connect, write each chunk separately, then close the write side."""
    with socket.create_connection(address, timeout=10) as sock:
        for chunk in chunks:
            sock.sendall(chunk)
        sock.shutdown(socket.SHUT_WR)


@pytest.fixture
def peer() -> Iterator[Callable[[Iterable[bytes]], Callable[[tuple[str, int]], None]]]:
    """Build an ``on_listening`` callback that starts a sending peer thread."""
    threads: list[threading.Thread] = []

    def factory(chunks: Iterable[bytes]) -> Callable[[tuple[str, int]], None]:
        def on_listening(address: tuple[str, int]) -> None:
            thread = threading.Thread(
                target=send_and_close, args=(address, list(chunks)), daemon=True
            )
            threads.append(thread)
            thread.start()

        return on_listening

    yield factory

    for thread in threads:
        thread.join(timeout=10)
