"""Readiness-polling loop merging the child's stdout and stderr."""

from __future__ import annotations
import logging
import os
import select
from typing import Callable, Dict, Protocol, Union
from hlerr._errors import StreamError
from hlerr._models import Role
from hlerr._output import ByteSink, LineAccumulator

lgr = logging.getLogger("hlerr")

READ_EVENTS = select.POLLIN | select.POLLPRI
# A writer-less pipe reports POLLHUP alone once drained
READY_EVENTS = READ_EVENTS | select.POLLHUP
ERROR_EVENTS = select.POLLERR | select.POLLNVAL


class HasFileno(Protocol):
    def fileno(self) -> int: ...


Source = Union[int, HasFileno]


def _fileno(source: Source) -> int:
    return source if isinstance(source, int) else source.fileno()


class Demultiplexer:
    """Reads both streams of a child one byte at a time and renders them.

    Each wake of the poll reads at most one byte from every ready source,
    stdout first, so that neither stream can starve the other.
    """

    def __init__(self, sink: ByteSink, accumulator: LineAccumulator) -> None:
        self.sink = sink
        self.accumulator = accumulator

    def run(self, stdout_source: Source, stderr_source: Source) -> None:
        """Render both sources until each of them reaches end-of-stream.

        Raises
        ------
        StreamError
            If polling or reading fails, or a source reports an error
            condition. Output already buffered for stdout is left in the
            accumulator for the caller to flush.
        """
        stdout_fd = _fileno(stdout_source)
        stderr_fd = _fileno(stderr_source)
        names = {stdout_fd: Role.STDOUT, stderr_fd: Role.STDERR}
        routes: Dict[int, Callable[[bytes], None]] = {
            stdout_fd: self.accumulator.accept,
            stderr_fd: self._render_stderr,
        }
        poller = select.poll()
        for fd in routes:
            poller.register(fd, READ_EVENTS)

        while routes:
            try:
                events = dict(poller.poll())
            except OSError as e:
                raise StreamError("poll()", e) from e
            if not events:
                break
            if any(mask & ERROR_EVENTS for mask in events.values()):
                raise StreamError("stream error")

            for fd in (stdout_fd, stderr_fd):
                if fd not in routes or not events.get(fd, 0) & READY_EVENTS:
                    continue
                try:
                    byte = os.read(fd, 1)
                except OSError as e:
                    raise StreamError(f"read() from {names[fd]} pipe", e) from e
                if not byte:
                    lgr.debug("End of %s stream", names[fd])
                    poller.unregister(fd)
                    del routes[fd]
                    continue
                routes[fd](byte)

    def _render_stderr(self, byte: bytes) -> None:
        # a partial stdout line received earlier must not be overtaken
        self.accumulator.flush()
        self.sink.write(byte, Role.STDERR)
