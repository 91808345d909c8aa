from __future__ import annotations
from importlib.metadata import version
import logging
import signal
import sys
from typing import IO, Optional
from hlerr._constants import DEFAULT_LINE_BUFFER_SIZE, EXIT_FAILURE
from hlerr._demux import Demultiplexer
from hlerr._errors import (
    ExecError,
    ReapError,
    SetupError,
    StreamError,
    UnknownStatusError,
)
from hlerr._output import ByteSink, LineAccumulator
from hlerr._signals import SigIntHandler
from hlerr._supervisor import ChildProcess, Pipe
from hlerr.ansi_colors import BLUE, RED

__version__ = version("hlerr")

lgr = logging.getLogger("hlerr")


def execute(
    command: str,
    command_args: list[str],
    line_buffer_size: int = DEFAULT_LINE_BUFFER_SIZE,
    stderr_color: int = RED,
    info_color: int = BLUE,
    stdout: Optional[IO[bytes]] = None,
    stderr: Optional[IO[bytes]] = None,
) -> int:
    """Run a command, rendering its stderr highlighted among its stdout.

    Returns the exit code hlerr should exit with: the command's own exit
    code if it exited, 1 otherwise.
    """
    sink = ByteSink(
        stdout if stdout is not None else sys.stdout.buffer,
        stderr if stderr is not None else sys.stderr.buffer,
        stderr_color=stderr_color,
        info_color=info_color,
    )
    accumulator = LineAccumulator(sink, line_buffer_size)
    full_command = " ".join([str(command)] + command_args)

    # On failure here descriptors are left for process exit to reclaim
    try:
        stdout_pipe = Pipe.open("stdout")
        stderr_pipe = Pipe.open("stderr")
        child = ChildProcess.spawn(
            [str(command)] + command_args,
            stdout_pipe.write_fd,  # type: ignore[arg-type]
            stderr_pipe.write_fd,  # type: ignore[arg-type]
        )
    except ExecError as e:
        lgr.error("%s", e)
        return e.exit_code
    except SetupError as e:
        lgr.error("%s", e)
        return EXIT_FAILURE

    try:
        previous_handler = signal.signal(signal.SIGINT, SigIntHandler(child.pid))
    except ValueError:
        # handlers can only be installed from the main thread
        lgr.debug("Not in the main thread, SIGINT is not passed to the command")
        previous_handler = None
    lgr.info("hlerr %s is executing %r...", __version__, full_command)
    try:
        stdout_pipe.close_write()
        stderr_pipe.close_write()
        Demultiplexer(sink, accumulator).run(stdout_pipe.read_fd, stderr_pipe.read_fd)
    except SetupError as e:
        lgr.error("%s", e)
    except StreamError as e:
        lgr.error("%s", e)
        lgr.debug("Abandoning output of %r, reaping it", full_command)
    finally:
        try:
            accumulator.flush()
        except StreamError as e:
            lgr.error("%s", e)
        # a child still writing into an abandoned pipe gets EPIPE once these close
        stdout_pipe.close_read()
        stderr_pipe.close_read()

    try:
        cause = child.wait()
    except (ReapError, UnknownStatusError) as e:
        lgr.error("%s", e)
        return EXIT_FAILURE
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    try:
        sink.write_info(cause.describe())
    except StreamError as e:
        lgr.error("%s", e)
    return cause.exit_code
