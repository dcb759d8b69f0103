"""Buffered output wrapper used by the formatter."""

from __future__ import annotations

import io
from typing import IO, Any

DEFAULT_BUFFER_SIZE = 4096


class BufferedSink:
    """Collect small writes and hand them to *stream* in larger pieces.

    Pending text is written once it reaches *size* characters and on
    ``flush()``. By default ``io.TextIOBase`` streams get ``str`` and
    anything else gets UTF-8 bytes; *binary* overrides that guess for
    writers that are neither.
    """

    def __init__(
        self,
        stream: IO[Any],
        size: int = DEFAULT_BUFFER_SIZE,
        binary: bool | None = None,
    ) -> None:
        if size <= 0:
            raise ValueError(f"buffer size must be positive, got {size}")
        self._stream = stream
        self._size = size
        if binary is None:
            binary = not isinstance(stream, io.TextIOBase)
        self._binary = binary
        self._parts: list[str] = []
        self._pending = 0

    @property
    def pending(self) -> int:
        """Characters written but not yet handed to the stream."""
        return self._pending

    def write(self, text: str) -> None:
        self._parts.append(text)
        self._pending += len(text)
        if self._pending >= self._size:
            self.flush()

    def flush(self) -> None:
        data = "".join(self._parts)
        self._parts.clear()
        self._pending = 0
        if not data:
            return
        if self._binary:
            self._stream.write(data.encode("utf-8"))
        else:
            self._stream.write(data)
