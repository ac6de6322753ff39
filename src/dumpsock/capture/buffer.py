"""Append-only byte buffer with an up-front capacity hint."""

from __future__ import annotations


class CaptureBuffer:
    """Ordered, append-only store for captured bytes.

    Storage is pre-allocated to ``capacity_hint`` bytes and doubled when
    exhausted. There is no upper bound.
    """

    def __init__(self, capacity_hint: int = 0) -> None:
        self._storage = bytearray(max(capacity_hint, 0))
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._storage)

    def extend(self, data: bytes | bytearray | memoryview) -> None:
        """Append ``data`` after the bytes already captured."""
        size = len(data)
        if not size:
            return
        end = self._length + size
        if end > len(self._storage):
            grow = max(len(self._storage), end - len(self._storage))
            self._storage.extend(bytes(grow))
        self._storage[self._length : end] = data
        self._length = end

    def view(self) -> memoryview:
        """Zero-copy view of the captured bytes."""
        return memoryview(self._storage)[: self._length]

    def getvalue(self) -> bytes:
        return bytes(self._storage[: self._length])
