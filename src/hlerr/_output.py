"""Rendering of the captured streams for hlerr."""

from __future__ import annotations
import logging
from typing import IO
from hlerr._constants import DEFAULT_LINE_BUFFER_SIZE
from hlerr._errors import StreamError
from hlerr._models import Role
from hlerr.ansi_colors import BLUE, RED, RESET_SEQ, color_seq

lgr = logging.getLogger("hlerr")

NEWLINE = 0x0A
END_MARKER = RESET_SEQ.encode("ascii")


class ByteSink:
    """Writes captured output, wrapping stderr spans in color markers.

    ``highlighted`` is the render state: True while a stderr span has been
    opened and not yet closed. Markers are emitted only when the role of
    consecutive writes changes. Highlight markers travel on the stderr target
    together with the bytes they wrap; stdout bytes and termination messages
    go to the stdout target.
    """

    def __init__(
        self,
        stdout: IO[bytes],
        stderr: IO[bytes],
        stderr_color: int = RED,
        info_color: int = BLUE,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.begin_marker = color_seq(stderr_color)
        self.info_marker = color_seq(info_color)
        self.highlighted = False

    def write(self, data: bytes, role: Role) -> None:
        if not data:
            return
        if role is Role.STDERR:
            if not self.highlighted:
                self._emit(self.stderr, self.begin_marker)
                self.highlighted = True
            self._emit(self.stderr, data)
        elif role is Role.STDOUT:
            self.end_highlight()
            self._emit(self.stdout, data)
        elif role is Role.INFO:
            self.end_highlight()
            self._emit(self.stdout, self.info_marker + data + END_MARKER)
        else:
            raise ValueError(f"Unsupported role {role!r}")

    def write_info(self, message: str) -> None:
        """Write a termination message, always on a line of its own."""
        self.write(message.encode(), Role.INFO)
        self._emit(self.stdout, b"\n")

    def end_highlight(self) -> None:
        if self.highlighted:
            self._emit(self.stderr, END_MARKER)
            self.highlighted = False

    @staticmethod
    def _emit(target: IO[bytes], data: bytes) -> None:
        try:
            target.write(data)
            target.flush()
        except OSError as e:
            raise StreamError("write()", e) from e


class LineAccumulator:
    """Batches stdout bytes into line sized writes to a :class:`ByteSink`.

    The buffer has a fixed capacity, so output without newlines is still
    passed on once ``capacity`` bytes have been collected.
    """

    def __init__(
        self, sink: ByteSink, capacity: int = DEFAULT_LINE_BUFFER_SIZE
    ) -> None:
        if capacity < 1:
            raise ValueError(f"Line buffer capacity must be positive, got {capacity}")
        self.sink = sink
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.fill = 0

    @property
    def pending(self) -> int:
        return self.fill

    def accept(self, byte: bytes) -> None:
        if len(byte) != 1:
            raise ValueError(f"Expected a single byte, got {len(byte)}")
        if self.fill >= self.capacity:
            self.flush()
        self.buffer[self.fill] = byte[0]
        self.fill += 1
        if byte[0] == NEWLINE or self.fill == self.capacity:
            self.flush()

    def flush(self) -> None:
        chunk = bytes(self.buffer[: self.fill])
        # cursor is reset even when the write fails
        self.fill = 0
        if chunk:
            self.sink.write(chunk, Role.STDOUT)
