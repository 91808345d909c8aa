#!/usr/bin/env python3
"""Write to stdout/stderr in a given order, then exit or die by a signal.

Actions are given as ``kind:argument`` pairs, e.g.::

    emit.py 'out:out1\n' sleep:0.2 err:err1 exit:3

Backslash escapes in the text are interpreted.
"""
from __future__ import annotations
import os
import signal
import sys
import time


def main(actions: list[str]) -> int:
    for action in actions:
        kind, _, argument = action.partition(":")
        if kind in ("out", "err"):
            data = argument.encode().decode("unicode_escape").encode("latin-1")
            os.write(1 if kind == "out" else 2, data)
        elif kind == "sleep":
            time.sleep(float(argument))
        elif kind == "exit":
            return int(argument)
        elif kind == "kill":
            os.kill(os.getpid(), getattr(signal, argument))
            time.sleep(10)
        else:
            raise ValueError(f"Unknown action {action!r}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
