"""Constants used throughout hlerr."""

import os

DEFAULT_LINE_BUFFER_SIZE = 1024
DEFAULT_STDERR_COLOR = "red"
DEFAULT_INFO_COLOR = "blue"
DEFAULT_LOG_LEVEL = "WARNING"

EXIT_FAILURE = 1
# mimicking behavior of bash and zsh
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127

# Default .env file search paths (in precedence order)
DEFAULT_CONFIG_PATHS_LIST = (
    "/etc/hlerr/.env",
    "${XDG_CONFIG_HOME:-~/.config}/hlerr/.env",
    ".hlerr/.env",
)
DEFAULT_CONFIG_PATHS = os.pathsep.join(DEFAULT_CONFIG_PATHS_LIST)
