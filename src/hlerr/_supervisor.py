"""Spawning and reaping of the child process."""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os
import subprocess
from typing import List, Optional
from hlerr._constants import EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND
from hlerr._errors import ExecError, ReapError, SetupError, UnknownStatusError
from hlerr._models import Exited, Signaled, TerminationCause
from hlerr._signals import signal_name

lgr = logging.getLogger("hlerr")


@dataclass
class Pipe:
    name: str
    read_fd: int
    write_fd: Optional[int]

    @classmethod
    def open(cls, name: str) -> Pipe:
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            raise SetupError(f"pipe({name})", e) from e
        return cls(name=name, read_fd=read_fd, write_fd=write_fd)

    def close_write(self) -> None:
        """Close the parent's copy of the write end.

        Until this is done the read end never reports end-of-stream.
        """
        if self.write_fd is None:
            return
        fd, self.write_fd = self.write_fd, None
        try:
            os.close(fd)
        except OSError as e:
            raise SetupError(f"close({self.name} write end)", e) from e

    def close_read(self) -> None:
        try:
            os.close(self.read_fd)
        except OSError as e:
            lgr.debug("Failed to close %s read end: %s", self.name, e)


def termination_cause(status: int, pid: int) -> TerminationCause:
    """Classify a raw wait status as returned by :func:`os.waitpid`."""
    if os.WIFEXITED(status):
        return Exited(os.WEXITSTATUS(status))
    if os.WIFSIGNALED(status):
        signum = os.WTERMSIG(status)
        return Signaled(signum, signal_name(signum))
    raise UnknownStatusError(status, pid)


class ChildProcess:
    """The command whose output hlerr renders."""

    def __init__(self, process: subprocess.Popen) -> None:
        self.process = process

    @property
    def pid(self) -> int:
        return self.process.pid

    @classmethod
    def spawn(cls, argv: List[str], stdout_fd: int, stderr_fd: int) -> ChildProcess:
        """Start `argv` with its stdout and stderr replaced by the given descriptors.

        The child leads a session of its own, so a Ctrl-C at the terminal
        reaches it only through the SIGINT handler of hlerr.

        Raises
        ------
        ExecError
            The command could not be found or is not executable.
        SetupError
            Any other failure to start the child (e.g. fork failing).
        """
        command = argv[0]
        try:
            process = subprocess.Popen(
                argv, stdout=stdout_fd, stderr=stderr_fd, start_new_session=True
            )
        except FileNotFoundError as e:
            raise ExecError(command, e, EXIT_NOT_FOUND) from e
        except OSError as e:
            # only errors raised by exec() in the child carry a filename
            if e.filename is not None:
                raise ExecError(command, e, EXIT_NOT_EXECUTABLE) from e
            raise SetupError("fork()", e) from e
        lgr.debug("Spawned %r as pid %d", command, process.pid)
        return cls(process)

    def wait(self) -> TerminationCause:
        """Block until the child is reaped and report how it terminated."""
        try:
            pid, status = os.waitpid(self.pid, 0)
        except OSError as e:
            raise ReapError("wait()", e) from e
        cause = termination_cause(status, pid)
        # keep Popen from trying to reap the child again
        self.process.returncode = cause.returncode
        lgr.debug("Reaped pid %d: %s", pid, cause.describe())
        return cause
