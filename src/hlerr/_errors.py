"""Exceptions raised by hlerr.

Every error carries the name of the failing operation and, where there is
one, the underlying :class:`OSError`, so that it can be reported the way
``perror(3)`` would.
"""

from __future__ import annotations
from typing import Optional

__all__ = [
    "HlerrError",
    "SetupError",
    "ExecError",
    "StreamError",
    "ReapError",
    "UnknownStatusError",
]


class HlerrError(Exception):
    """Base class for all hlerr errors."""

    def __init__(self, operation: str, cause: Optional[OSError] = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(operation, cause)

    def __str__(self) -> str:
        if self.cause is None:
            return self.operation
        return f"{self.operation}: {self.cause.strerror or self.cause}"


class SetupError(HlerrError):
    """Creating pipes or spawning the child failed before it could run."""


class ExecError(SetupError):
    """The command itself could not be executed.

    Attributes:
        command: the command which failed to execute
        exit_code: shell-compatible exit code (127 not found, 126 otherwise)
    """

    cause: OSError

    def __init__(self, command: str, cause: OSError, exit_code: int) -> None:
        self.command = command
        self.exit_code = exit_code
        super().__init__("exec()", cause)

    def __str__(self) -> str:
        if isinstance(self.cause, FileNotFoundError):
            return f"{self.command}: command not found"
        return f"{self.command}: {self.cause.strerror or self.cause}"


class StreamError(HlerrError):
    """Polling, reading or rendering the captured streams failed."""


class ReapError(HlerrError):
    """Waiting for the child process failed."""


class UnknownStatusError(HlerrError):
    """The child reported neither a normal exit nor a terminating signal."""

    def __init__(self, status: int, pid: int) -> None:
        self.status = status
        self.pid = pid
        super().__init__("wait()")

    def __str__(self) -> str:
        return f"Unknown status {self.status} returned from wait() for pid {self.pid}"
