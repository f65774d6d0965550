"""Shared test fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable

import pytest


class ShortReadStream(io.BytesIO):
    """BytesIO whose reads never return more than *chunk* bytes."""

    def __init__(self, data: bytes, chunk: int) -> None:
        super().__init__(data)
        self.chunk = chunk

    def read(self, size: int | None = -1) -> bytes:
        if size is None or size < 0 or size > self.chunk:
            size = self.chunk
        return super().read(size)


class FailingStream(io.RawIOBase):
    """Serves *good* bytes on the first read, then raises OSError."""

    def __init__(self, good: bytes = b"") -> None:
        self.good = good
        self.reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self.reads == 1 and self.good:
            return self.good
        msg = "device unplugged"
        raise OSError(msg)

    def write(self, data: bytes) -> int:
        msg = "disk full"
        raise OSError(msg)


@pytest.fixture
def short_reads() -> Callable[[bytes, int], ShortReadStream]:
    """Factory for streams that hand out data in small pieces."""
    return ShortReadStream


@pytest.fixture
def failing_stream() -> type[FailingStream]:
    return FailingStream
