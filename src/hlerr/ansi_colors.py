"""
Definitions for ansi colors etc

Originally copied from the `datalad` (MIT Licence) project on September 20, 2024
https://github.com/datalad/datalad/blob/b55d8b7292fcb37b3ba6faad7fd7107fcc1caa50/datalad/support/ansi_colors.py#L4
"""

from __future__ import annotations

BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(30, 38)

COLOR_NAMES = {
    "black": BLACK,
    "red": RED,
    "green": GREEN,
    "yellow": YELLOW,
    "blue": BLUE,
    "magenta": MAGENTA,
    "cyan": CYAN,
    "white": WHITE,
}

# Plain (non-bold) SGR sequences, terminal defaults restored by a bare reset
RESET_SEQ = "\033[m"
COLOR_SEQ = "\033[%dm"


def color_seq(color: int) -> bytes:
    """Begin-marker for `color` as raw bytes."""
    return (COLOR_SEQ % color).encode("ascii")


def color_from_name(name: str) -> int:
    try:
        return COLOR_NAMES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown color {name!r}, expected one of: {', '.join(COLOR_NAMES)}"
        ) from None

