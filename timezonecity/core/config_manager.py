"""Configuration management for timezonecity."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_PATH = "timezonecity.db"
DEFAULT_DATABASE_TIMEOUT = 30.0
# Longitude window (degrees) for the in-country phase of the nearest-zone search
DEFAULT_NEAREST_LONGITUDE_WINDOW = 15.0


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
        - Handles KEY=VALUE format with optional whitespace
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("Failed to read .env file (continuing): %s", str(path), exc_info=True)
        return result

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")

        if key:
            result[key] = val

    return result


class TimeZoneCityConfig(BaseModel):
    """Validated runtime configuration."""

    database_path: Path = Field(
        default=Path(DEFAULT_DATABASE_PATH), description="SQLite file holding the timezonecity table"
    )
    database_timeout: float = Field(
        default=DEFAULT_DATABASE_TIMEOUT, gt=0, description="Seconds to wait on a locked database"
    )
    nearest_longitude_window: float = Field(
        default=DEFAULT_NEAREST_LONGITUDE_WINDOW,
        gt=0,
        le=180,
        description="Longitude window in degrees for in-country nearest-zone matches",
    )
    log_level: Optional[str] = Field(default=None, description="Root log level override")


class ConfigManager:
    """Manages application configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment to avoid
        surprising overrides of user's environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        parsed = parse_env_file(self.env_file_path)

        set_keys = []
        for key, val in parsed.items():
            if key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - TIMEZONECITY_DB_PATH -> 'database_path'
        - TIMEZONECITY_DB_TIMEOUT -> 'database_timeout' (float)
        - TIMEZONECITY_NEAREST_WINDOW -> 'nearest_longitude_window' (float)
        - TIMEZONECITY_LOG_LEVEL -> 'log_level'

        Returns:
            Configuration dictionary
        """
        cfg: dict[str, Any] = {}

        db_path = os.environ.get("TIMEZONECITY_DB_PATH")
        if db_path:
            cfg["database_path"] = db_path

        timeout = os.environ.get("TIMEZONECITY_DB_TIMEOUT")
        if timeout:
            try:
                value = float(timeout)
                if value <= 0:
                    raise ValueError(timeout)
                cfg["database_timeout"] = value
            except ValueError:
                logger.warning("Invalid TIMEZONECITY_DB_TIMEOUT=%r; ignoring", timeout)

        window = os.environ.get("TIMEZONECITY_NEAREST_WINDOW")
        if window:
            try:
                value = float(window)
                if not 0 < value <= 180:
                    raise ValueError(window)
                cfg["nearest_longitude_window"] = value
            except ValueError:
                logger.warning("Invalid TIMEZONECITY_NEAREST_WINDOW=%r; ignoring", window)

        log_level = os.environ.get("TIMEZONECITY_LOG_LEVEL")
        if log_level:
            cfg["log_level"] = log_level.upper()

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment.

        Returns:
            Configuration dictionary
        """
        self.load_env_file()
        return self.build_config_from_env()

    def load_config(self, **overrides: Any) -> TimeZoneCityConfig:
        """Load and validate configuration; explicit overrides win over the environment.

        Overrides whose value is None are ignored so CLI flags left unset fall
        through to the environment.
        """
        cfg = self.load_full_config()
        cfg.update({key: value for key, value in overrides.items() if value is not None})
        return TimeZoneCityConfig.model_validate(cfg)
