"""Signal names and signal handlers for hlerr."""

from __future__ import annotations
import logging
import os
import signal
from types import FrameType, MappingProxyType
from typing import Mapping, Optional

lgr = logging.getLogger("hlerr")

_KNOWN_SIGNALS = (
    "SIGABRT",
    "SIGALRM",
    "SIGBUS",
    "SIGCHLD",
    "SIGCONT",
    "SIGFPE",
    "SIGHUP",
    "SIGILL",
    "SIGINT",
    "SIGKILL",
    "SIGPIPE",
    "SIGQUIT",
    "SIGSEGV",
    "SIGSTOP",
    "SIGTERM",
    "SIGTSTP",
    "SIGTTIN",
    "SIGTTOU",
    "SIGUSR1",
    "SIGUSR2",
    "SIGPOLL",
    "SIGPROF",
    "SIGSYS",
    "SIGTRAP",
    "SIGURG",
    "SIGVTALRM",
    "SIGXCPU",
    "SIGXFSZ",
)

# Not every platform defines all of them (e.g. no SIGPOLL on macOS). Where two
# names share a number (SIGIO/SIGPOLL) the first listed wins.
SIGNAL_NAMES: Mapping[int, str] = MappingProxyType(
    {
        int(getattr(signal, name)): name
        for name in reversed(_KNOWN_SIGNALS)
        if hasattr(signal, name)
    }
)


def signal_name(signum: int) -> Optional[str]:
    """Name of signal `signum`, or None if it is not a well-known one."""
    return SIGNAL_NAMES.get(signum)


class SigIntHandler:
    """
    Handler of SIGINT signals received by the process running hlerr.

    hlerr itself keeps draining the child's output; the signal is passed on
    so that the child decides how to terminate, and hlerr reports it.
    """

    def __init__(self, pid: int) -> None:
        """
        Parameters
        ----------
        pid : int
            The PID of the child process whose output is rendered
        """
        self.pid: int = pid
        self.sigcount: int = 0

    def __call__(self, _sig: int, _frame: Optional[FrameType]) -> None:
        self.sigcount += 1
        try:
            if self.sigcount == 1:
                lgr.info("Received SIGINT, passing to command")
                os.kill(self.pid, signal.SIGINT)
            elif self.sigcount == 2:
                lgr.info("Received second SIGINT, again passing to command")
                os.kill(self.pid, signal.SIGINT)
            elif self.sigcount == 3:
                lgr.warning("Received third SIGINT, forcefully killing command process")
                os.kill(self.pid, signal.SIGKILL)
        except ProcessLookupError:
            lgr.debug("Command process %d is already gone", self.pid)
        if self.sigcount >= 4:
            lgr.critical("Exiting hlerr, skipping cleanup")
            os._exit(1)
