"""Thread-safe response writer shared by concurrent foundation tasks."""

from __future__ import annotations

import queue
import threading
from typing import Iterator

from .interfaces import ResponseStreamPort


class SynchronizedResponseWriter(ResponseStreamPort):
    """Serialize writes from concurrent foundation tasks onto one response stream.

    Each `write` call lands as one contiguous chunk; chunks from different
    foundations may alternate but never interleave mid-chunk.
    """

    def __init__(self, target: ResponseStreamPort):
        """Initialize writer around a target byte stream.

        Args:
            target: Byte stream receiving deployment output.

        Raises:
            ValueError: Raised when target is None.
        """

        if target is None:
            raise ValueError("target must not be None")
        self._target = target
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        """Append bytes under the writer lock and flush when supported.

        Args:
            data: Bytes to append.

        Returns:
            int: Number of bytes accepted.

        Raises:
            OSError: Raised by the target stream on write failure.
        """

        if not data:
            return 0
        with self._lock:
            self._target.write(data)
            flush = getattr(self._target, "flush", None)
            if flush is not None:
                flush()
        return len(data)


def job_wrap_response(response: ResponseStreamPort) -> SynchronizedResponseWriter:
    """Return a synchronized writer for a response, reusing one if already wrapped."""

    if isinstance(response, SynchronizedResponseWriter):
        return response
    return SynchronizedResponseWriter(response)


class QueuedResponseStream(ResponseStreamPort):
    """Hand deployment output from a worker thread to a consuming iterator.

    Writers never block. `stream_iter_chunks` yields chunks in write order and
    returns once `stream_close` has been called and the queue is drained.
    """

    def __init__(self):
        self._chunks: queue.Queue[bytes | None] = queue.Queue()

    def write(self, data: bytes) -> int:
        """Enqueue one chunk of output; empty chunks are dropped."""

        if not data:
            return 0
        self._chunks.put(bytes(data))
        return len(data)

    def stream_close(self) -> None:
        """Mark the end of output."""

        self._chunks.put(None)

    def stream_iter_chunks(self) -> Iterator[bytes]:
        """Yield chunks as they arrive until the stream is closed."""

        while True:
            chunk = self._chunks.get()
            if chunk is None:
                return
            yield chunk
