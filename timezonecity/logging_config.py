"""Central logging configuration for timezonecity.

The library itself only creates module loggers; handlers are installed by
applications (or the bundled CLI) through init_logging()/configure_logging().
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

PACKAGE_LOGGER = "timezonecity"

_TRUTHY = ("1", "true", "yes", "on")

# HH:MM:SS  LEVEL   logger.name: message, only the level is colorized
_CONSOLE_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def init_logging(level_name: Optional[str] = None) -> None:
    """Initialize root logging to stream colorized records to stderr.

    A handler is only added when the root logger has none, so repeated calls
    and host applications with their own logging setup are left alone. The
    TIMEZONECITY_DEBUG environment variable (1/true/yes/on) forces DEBUG.

    Args:
        level_name: Level name such as "INFO" or "debug"; unknown names fall
            back to INFO.
    """
    debug_env = os.environ.get("TIMEZONECITY_DEBUG", "")
    if debug_env.strip().lower() in _TRUTHY:
        level_name = "DEBUG"

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(
            ColoredFormatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S", log_colors=_LOG_COLORS)
        )
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        candidate = logging.getLevelName(level_name.upper())
        if isinstance(candidate, int):
            level = candidate
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """Apply log levels for the package and the root logger.

    Args:
        debug_mode: Whether to enable debug logging for timezonecity modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        TIMEZONECITY_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        TIMEZONECITY_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("TIMEZONECITY_DEBUG", "").lower() in _TRUTHY
    env_log_level = os.getenv("TIMEZONECITY_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    logging.getLogger().setLevel(root_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if final_debug else logging.INFO)

    if final_debug:
        logging.getLogger(__name__).debug("Debug logging enabled for timezonecity modules")


def get_logging_status() -> dict[str, str]:
    """Return the current level names of the root and package loggers."""
    return {
        "root": logging.getLevelName(logging.getLogger().level),
        PACKAGE_LOGGER: logging.getLevelName(logging.getLogger(PACKAGE_LOGGER).level),
    }
