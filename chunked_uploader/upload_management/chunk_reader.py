"""Buffered reads of bounded chunks from an input stream."""

from __future__ import annotations

import io
from typing import BinaryIO


def _read_into(stream: BinaryIO, view: memoryview) -> int | None:
    """Read once from ``stream`` into ``view``.

    Returns:
        Bytes read, 0 at end-of-stream, or None if a non-blocking stream has
        no data available yet.
    """
    readinto = getattr(stream, "readinto", None)
    if readinto is not None:
        return readinto(view)

    data = stream.read(len(view))
    if data is None:
        return None
    view[: len(data)] = data
    return len(data)


def buffer_chunk(
    stream: BinaryIO,
    buffer: bytearray | memoryview,
    capacity: int | None = None,
) -> int:
    """Read a chunk of the stream, up to ``capacity`` bytes, into ``buffer``.

    A single read may return fewer bytes than requested without that meaning
    end-of-stream, so reads are repeated until the chunk is full or the stream
    is exhausted.

    Pass a blocking stream. A non-blocking stream that reports no data
    available (``None``) is polled again immediately, without waiting.

    Args:
        stream: The stream to read.
        buffer: The buffer to fill, starting at offset 0.
        capacity: Maximum bytes to read. Defaults to ``len(buffer)``.

    Returns:
        The number of bytes read. 0 only if the stream was already exhausted.

    Raises:
        ValueError: If ``capacity`` exceeds the buffer size.
    """
    if capacity is None:
        capacity = len(buffer)
    if capacity > len(buffer):
        raise ValueError(f"capacity {capacity} exceeds buffer size {len(buffer)}")

    offset = 0
    with memoryview(buffer) as view:
        while offset < capacity:
            bytes_read = _read_into(stream, view[offset:capacity])
            if bytes_read is None:
                continue
            if bytes_read == 0:
                break
            offset += bytes_read
    return offset


class PrefixedStream(io.RawIOBase):
    """Read-only stream yielding ``prefix`` followed by the rest of ``stream``.

    Used for the overflow tail of an upload: the bytes already buffered while
    checking for more data come first, then the unread remainder. ``tell``
    reports bytes served so far, which lets upload clients that track stream
    position consume it.
    """

    def __init__(self, prefix: bytes | memoryview, stream: BinaryIO) -> None:
        """Initialize the stream.

        Args:
            prefix: Bytes to serve before reading from ``stream``.
            stream: The underlying stream. It is not closed by this wrapper.
        """
        super().__init__()
        self._prefix = memoryview(prefix)
        self._stream = stream
        self._position = 0

    def readable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    def readinto(self, b: bytearray | memoryview) -> int:
        """Fill ``b`` completely unless the underlying stream ends first.

        Upload clients treat a short read as end-of-stream, so the prefix and
        the underlying stream are both drained into the same call.
        """
        target = memoryview(b).cast("B")
        n = 0
        if len(self._prefix) > 0:
            n = min(len(target), len(self._prefix))
            target[:n] = self._prefix[:n]
            self._prefix = self._prefix[n:]
        if n < len(target):
            n += buffer_chunk(self._stream, target[n:])
        self._position += n
        return n
