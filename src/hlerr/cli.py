import argparse
import logging
import os
from pathlib import Path
import re
import sys
import textwrap
from typing import List, Optional
from dotenv import load_dotenv
from hlerr import __version__
from hlerr._constants import (
    DEFAULT_CONFIG_PATHS,
    DEFAULT_CONFIG_PATHS_LIST,
    DEFAULT_INFO_COLOR,
    DEFAULT_LINE_BUFFER_SIZE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STDERR_COLOR,
)
from hlerr.ansi_colors import COLOR_NAMES, color_from_name
from hlerr.hlerr_main import execute as hlerr_execute

lgr = logging.getLogger("hlerr")


def load_hlerr_env_files() -> List[tuple[str, str]]:
    """Load environment variables from .env files in multiple locations.

    Searches for .env files specified in HLERR_CONFIG_PATHS (or DEFAULT_CONFIG_PATHS).
    Files are loaded in reverse order so later files override earlier ones.

    Environment variables already set in the environment will NOT be overridden
    by values from .env files, maintaining proper precedence:
    CLI args > explicit env vars > .env files > hardcoded defaults

    Returns:
        List of (level_name, message) tuples for deferred logging.
    """
    log_buffer: List[tuple[str, str]] = []

    config_paths_str = os.getenv("HLERR_CONFIG_PATHS", DEFAULT_CONFIG_PATHS)
    log_buffer.append(("DEBUG", f"Searching for .env files in: {config_paths_str}"))

    # Expand ${VAR:-default} syntax in the paths string ie ${XDG_CONFIG_HOME:-~/.config}
    def expand_var(match: re.Match) -> str:
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        return os.getenv(var_expr, "")

    config_paths_str = re.sub(r"\$\{([^}]+)\}", expand_var, config_paths_str)
    search_paths = [
        val for p in config_paths_str.split(os.pathsep) if (val := p.strip())
    ]

    # Load in reverse order so later paths override earlier ones (once set, vars are skipped)
    loaded_count = 0
    for path in reversed(search_paths):
        expanded_path = Path(path).expanduser()
        if expanded_path.exists():
            log_buffer.append(("INFO", f"Loading .env file: {expanded_path}"))
            try:
                load_dotenv(expanded_path, override=False)
                loaded_count += 1
            except PermissionError as e:
                log_buffer.append(
                    ("WARNING", f"Cannot read .env file {expanded_path}: {e}")
                )
            except ValueError as e:
                log_buffer.append(
                    ("WARNING", f"Skipping malformed .env file {expanded_path}: {e}")
                )
        else:
            log_buffer.append(
                ("DEBUG", f".env file not found (skipping): {expanded_path}")
            )

    if loaded_count == 0:
        log_buffer.append(("DEBUG", "No .env files found"))

    return log_buffer


def _replay_early_logs(log_buffer: List[tuple[str, str]]) -> None:
    """Replay buffered log messages through the configured logger.

    Should be called after setup_logging() so buffered messages from .env
    file loading honor the user's chosen log level.
    """
    for level_name, message in log_buffer:
        lgr.log(getattr(logging, level_name), message)


_config_paths_list = "\n".join(f"    - {path}" for path in DEFAULT_CONFIG_PATHS_LIST)

ABOUT_HLERR = f"""
hlerr runs a command and shows its standard output and standard error on the
terminal, with standard error highlighted in color. Both streams are read as
they are produced, so their interleaving on screen follows the order in which
the command wrote them as closely as possible. Standard output is passed on a
line at a time, standard error as soon as each byte arrives.

When the command terminates, hlerr reports how: its exit status, or the
signal which killed it. hlerr exits with the exit status of the command, or 1
if the command was killed by a signal.

environment variables:
  Options can be configured by environment variables (which are overridden by
  command line options).

  HLERR_LOG_LEVEL: see --log-level
  HLERR_STDERR_COLOR: see --stderr-color
  HLERR_INFO_COLOR: see --info-color
  HLERR_LINE_BUFFER_SIZE: see --line-buffer-size
  HLERR_CONFIG_PATHS: paths to .env files separated by platform path separator
    (':' on Unix) (see below)

.env files:
  Environment variables can also be set via .env files. By default, hlerr
  searches the following locations (later files override earlier ones):

{_config_paths_list}

  Precedence (highest to lowest):
    1. Command line arguments
    2. Explicit environment variables
    3. .env file values (later paths override earlier paths)
    4. Hardcoded defaults
"""


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """Override allows helptext to respect newlines in ABOUT_HLERR"""

    def _fill_text(self, text: str, width: int, _indent: str) -> str:
        return "\n".join([textwrap.fill(line, width) for line in text.splitlines()])


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _color(value: str) -> int:
    try:
        return color_from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging based on parsed arguments.

    Handles both --log-level and --quiet flags.
    """
    log_level = "NONE" if args.quiet else args.log_level

    # Special case: NONE means disable all logging
    if log_level == "NONE":
        logging.disable(logging.CRITICAL)
    else:
        logging.basicConfig(
            format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
            level=log_level,
        )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hlerr",
        allow_abbrev=False,
        description=ABOUT_HLERR,
        formatter_class=CustomHelpFormatter,
    )
    parser.add_argument(
        "command",
        metavar="command [command_args ...]",
        help="The command to execute, along with its arguments.",
    )
    parser.add_argument(
        "command_args", nargs=argparse.REMAINDER, help="Arguments for the command."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=os.getenv("HLERR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        choices=("NONE", "CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"),
        type=str.upper,
        help="Level of log output to stderr, use NONE to entirely disable.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Disable hlerr logging output (to stderr), same as --log-level NONE.",
    )
    parser.add_argument(
        "--stderr-color",
        type=_color,
        default=os.getenv("HLERR_STDERR_COLOR", DEFAULT_STDERR_COLOR),
        metavar="{%s}" % ",".join(COLOR_NAMES),
        help="Color used to highlight the standard error of the command.",
    )
    parser.add_argument(
        "--info-color",
        type=_color,
        default=os.getenv("HLERR_INFO_COLOR", DEFAULT_INFO_COLOR),
        metavar="{%s}" % ",".join(COLOR_NAMES),
        help="Color of the message reporting how the command terminated.",
    )
    parser.add_argument(
        "--line-buffer-size",
        type=_positive_int,
        default=os.getenv("HLERR_LINE_BUFFER_SIZE", str(DEFAULT_LINE_BUFFER_SIZE)),
        help="Size in bytes of the buffer collecting a line of standard output. "
        "Longer lines are passed on in pieces of this size.",
    )
    return parser


def run_command(args: argparse.Namespace) -> int:
    """Execute a command with its stderr highlighted."""
    kwargs = vars(args).copy()
    # Remove arguments that are not for hlerr_execute
    for key in ("log_level", "quiet"):
        kwargs.pop(key, None)
    return hlerr_execute(**kwargs)


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env files before parser creation so defaults pick up env vars
    env_log_buffer = load_hlerr_env_files()

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args)
    _replay_early_logs(env_log_buffer)
    sys.exit(run_command(args))
