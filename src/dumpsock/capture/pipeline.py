"""Capture pipeline — one listener, one connection, one drain.

Each step takes the current CaptureState and returns the next one. A step
given a Failed state returns it untouched, so the first failure skips every
later socket call while ``report`` still runs and sees it.
"""

from __future__ import annotations

import logging
import os
import socket
import time
from collections.abc import Callable
from typing import BinaryIO, TypeVar

from rich.console import Console

from dumpsock.capture.buffer import CaptureBuffer
from dumpsock.capture.models import Active, CaptureState, CaptureStep, DrainStats, Failed
from dumpsock.capture.report import report
from dumpsock.capture.subsystem import NetworkSubsystem
from dumpsock.config import DumpConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fail(
    state: Active, step: CaptureStep, message: str, partial: bytes = b""
) -> Failed:
    """Release everything the Active state holds and switch to Failed."""
    logger.debug("%s step failed: %s", step.value, message)
    state.release()
    return Failed(step=step, message=message, partial=partial)


def _require(value: T | None, what: str, step: CaptureStep) -> T:
    if value is None:
        raise RuntimeError(f"{step.value} step needs {what}; run the earlier steps first")
    return value


def new_state(config: DumpConfig) -> Active:
    return Active(buffer=CaptureBuffer(config.capacity_hint))


def init_subsystem(state: CaptureState) -> CaptureState:
    if isinstance(state, Failed):
        return state

    subsystem = NetworkSubsystem()
    try:
        subsystem.startup()
    except OSError as exc:
        code = exc.errno if exc.errno is not None else exc
        return _fail(state, CaptureStep.INIT, f"network subsystem startup failed: {code}")

    state.resources.callback(subsystem.shutdown)
    state.subsystem = subsystem
    return state


def create_socket(state: CaptureState) -> CaptureState:
    if isinstance(state, Failed):
        return state

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    except OSError as exc:
        return _fail(state, CaptureStep.CREATE_SOCKET, f"couldn't create a tcp socket: {exc}")

    state.resources.enter_context(sock)
    state.listener = sock
    logger.debug("Created TCP listening socket (fd %d)", sock.fileno())
    return state


def bind_socket(state: CaptureState, address: tuple[str, int]) -> CaptureState:
    if isinstance(state, Failed):
        return state

    listener = _require(state.listener, "a listening socket", CaptureStep.BIND)
    try:
        # SO_REUSEADDR on Windows lets a second listener take over the port.
        if os.name != "nt":
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(address)
    except OSError as exc:
        return _fail(state, CaptureStep.BIND, f"socket bind error: {exc}")

    state.address = listener.getsockname()[:2]
    logger.debug("Bound to %s:%d", *state.address)
    return state


def listen_socket(state: CaptureState, backlog: int = 1) -> CaptureState:
    if isinstance(state, Failed):
        return state

    listener = _require(state.listener, "a listening socket", CaptureStep.LISTEN)
    try:
        listener.listen(backlog)
    except OSError as exc:
        return _fail(state, CaptureStep.LISTEN, f"socket listen error: {exc}")

    logger.debug("Listening with backlog %d", backlog)
    return state


def accept_connection(state: CaptureState) -> CaptureState:
    """Block until a single peer connects. Never called twice."""
    if isinstance(state, Failed):
        return state

    listener = _require(state.listener, "a listening socket", CaptureStep.ACCEPT)
    try:
        conn, peer = listener.accept()
    except OSError as exc:
        return _fail(state, CaptureStep.ACCEPT, f"socket accept error: {exc}")

    state.resources.enter_context(conn)
    state.connection = conn
    state.peer = peer[:2]
    logger.info("Accepted connection from %s:%d", *state.peer)
    return state


def drain_connection(state: CaptureState, chunk_size: int = 4096) -> CaptureState:
    """Read until the peer closes its side.

    A zero-byte read is the only success terminator. A transport error
    abandons the capture; the bytes read so far survive only as
    ``Failed.partial``.
    """
    if isinstance(state, Failed):
        return state

    connection = _require(state.connection, "an accepted connection", CaptureStep.DRAIN)
    chunk = bytearray(chunk_size)
    view = memoryview(chunk)
    buffer = state.buffer

    start = time.perf_counter()
    while True:
        try:
            received = connection.recv_into(view, chunk_size)
        except OSError as exc:
            return _fail(
                state,
                CaptureStep.DRAIN,
                f"socket error during read: {exc}",
                partial=buffer.getvalue(),
            )
        if received == 0:
            break
        buffer.extend(view[:received])
    elapsed = time.perf_counter() - start

    state.stats = DrainStats(byte_count=len(buffer), elapsed=elapsed)
    logger.debug("Peer closed after %d bytes", len(buffer))
    return state


def run_capture(
    config: DumpConfig,
    stdout: BinaryIO,
    console: Console,
    on_listening: Callable[[tuple[str, int]], None] | None = None,
) -> int:
    """Run the whole pipeline once and return the exit status."""
    state: CaptureState = new_state(config)
    try:
        state = init_subsystem(state)
        state = create_socket(state)
        state = bind_socket(state, config.address)
        state = listen_socket(state, config.backlog)
        if isinstance(state, Active) and on_listening is not None:
            on_listening(_require(state.address, "a bound address", CaptureStep.LISTEN))
        state = accept_connection(state)
        state = drain_connection(state, config.chunk_size)
    except BaseException:
        state.release()
        raise
    return report(state, stdout, console)
