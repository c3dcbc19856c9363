"""Buffered, append-only byte sink with legacy CR line endings"""

import logging
from typing import BinaryIO

from mdteach.core.errors import SinkError


logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4096


class OutputSink:
    """Fixed-size write buffer in front of a sequential binary destination.

    `write` maps every LF to CR before storing; `write_record` stores bytes
    as given (binary container fields). Bytes are only handed to the
    destination when the buffer is full, on `flush`, or on `close`.
    """

    def __init__(self, destination: BinaryIO, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Sink capacity must be positive, got {capacity}")
        self.destination = destination
        self.capacity = capacity
        self.written = 0            # bytes accepted since creation
        self._buffer = bytearray(capacity)
        self._cursor = 0
        self._closed = False

    @property
    def pending(self) -> int:
        """Bytes buffered but not yet flushed."""
        return self._cursor

    def write(self, data: bytes) -> None:
        """Append text bytes, translating LF to CR."""
        self._store(data.replace(b'\n', b'\r'))

    def write_record(self, data: bytes) -> None:
        """Append binary bytes untouched."""
        self._store(data)

    def _store(self, data: bytes) -> None:
        if self._closed:
            raise ValueError("Write to a closed sink")
        view = memoryview(data)
        pos = 0
        while pos < len(data):
            if self._cursor == self.capacity:
                self.flush()
            n = min(self.capacity - self._cursor, len(data) - pos)
            self._buffer[self._cursor:self._cursor + n] = view[pos:pos + n]
            self._cursor += n
            pos += n
        self.written += len(data)

    def flush(self) -> None:
        """Hand the buffered bytes to the destination and reset the cursor."""
        if self._cursor == 0:
            return
        chunk = bytes(self._buffer[:self._cursor])
        try:
            count = self.destination.write(chunk)
        except OSError as e:
            raise SinkError(f"Error writing to output file: {e}") from e
        if count is not None and count != len(chunk):
            raise SinkError(f"Error writing to output file: short write ({count} of {len(chunk)} bytes)")
        logger.debug("Flushed %d bytes", len(chunk))
        self._cursor = 0

    def close(self) -> None:
        """Flush any remaining bytes; the destination itself stays open."""
        if self._closed:
            return
        self.flush()
        self._closed = True
