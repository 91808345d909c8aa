from __future__ import annotations
from io import BytesIO
from pathlib import Path
import sys
from typing import Any

TEST_SCRIPT_DIR = Path(__file__).with_name("data")

RED_START = b"\x1b[31m"
BLUE_START = b"\x1b[34m"
END = b"\x1b[m"


def emit_command(*actions: str) -> list[str]:
    """Command line running data/emit.py with the given actions."""
    return [sys.executable, str(TEST_SCRIPT_DIR / "emit.py"), *actions]


def run_hlerr_command(cli_args: list[str], **kwargs: Any) -> tuple[int, bytes]:
    """Helper to run hlerr with both streams rendered into one buffer.

    Args:
        cli_args: Command and its arguments as a list (e.g., ["echo", "hello"])
        **kwargs: Override any hlerr execute parameters

    Returns:
        Exit code of hlerr and everything it rendered, in order
    """
    from hlerr.hlerr_main import execute as hlerr_execute

    command = cli_args[0]
    command_args = cli_args[1:] if len(cli_args) > 1 else []

    terminal = BytesIO()
    defaults: dict[str, Any] = {"stdout": terminal, "stderr": terminal}
    defaults.update(kwargs)
    exit_code = hlerr_execute(command=command, command_args=command_args, **defaults)
    return exit_code, terminal.getvalue()


def split_rendered(rendered: bytes) -> tuple[bytes, bytes]:
    """Separate rendered output into (plain bytes, highlighted bytes)."""
    plain, highlighted = bytearray(), bytearray()
    in_span = False
    i = 0
    while i < len(rendered):
        if rendered.startswith(RED_START, i):
            in_span = True
            i += len(RED_START)
        elif rendered.startswith(END, i):
            in_span = False
            i += len(END)
        else:
            (highlighted if in_span else plain).append(rendered[i])
            i += 1
    return bytes(plain), bytes(highlighted)
