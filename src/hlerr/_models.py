"""Data models and enums for hlerr."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from hlerr._constants import EXIT_FAILURE


class Role(str, Enum):
    """Origin of a chunk of output, which decides how it is rendered."""

    STDOUT = "stdout"
    STDERR = "stderr"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Exited:
    code: int

    def describe(self) -> str:
        return f"Exited with status {self.code}"

    @property
    def exit_code(self) -> int:
        return self.code

    @property
    def returncode(self) -> int:
        return self.code


@dataclass(frozen=True)
class Signaled:
    signum: int
    name: Optional[str] = None

    def describe(self) -> str:
        if self.name:
            return f"Killed by signal {self.signum} ({self.name})"
        return f"Killed by signal {self.signum}"

    @property
    def exit_code(self) -> int:
        return EXIT_FAILURE

    @property
    def returncode(self) -> int:
        # Same convention as subprocess.Popen.returncode
        return -self.signum


TerminationCause = Union[Exited, Signaled]
