"""
Settings for the search-lab command line.

Values come from a JSON object file merged over ``DEFAULT_SETTINGS``. The
file is ``search_lab.json`` in the working directory unless the
``SEARCH_LAB_CONFIG`` environment variable or an explicit path names another.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .nqueens import ENGINES

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("search_lab.json")
SETTINGS_ENV_VAR = "SEARCH_LAB_CONFIG"

DEFAULT_SETTINGS: dict[str, Any] = {
    "board_size": 8,
    "engine": "backtracking",
    "max_steps": 100_000,
    "log_level": "WARNING",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _settings_path(path: Path | str | None) -> Path:
    if path is not None:
        return Path(path)
    from_env = os.environ.get(SETTINGS_ENV_VAR)
    if from_env:
        return Path(from_env)
    return SETTINGS_FILE


def validate_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Check value types and ranges; raises ValueError on the first bad one."""
    for key in ("board_size", "max_steps"):
        value = settings[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"Setting {key!r} must be an integer >= 1, got {value!r}.")
    if settings["engine"] not in ENGINES:
        raise ValueError(
            f"Setting 'engine' must be one of {', '.join(ENGINES)}, "
            f"got {settings['engine']!r}."
        )
    level = settings["log_level"]
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        raise ValueError(f"Setting 'log_level' must be one of {', '.join(_LOG_LEVELS)}.")
    return settings


def load_settings(path: Path | str | None = None) -> dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file; defaults to the environment variable or
            ``SETTINGS_FILE``.

    Returns:
        Settings dictionary. Defaults if the file is missing or unreadable.

    Raises:
        ValueError: If a known key holds an invalid value.
    """
    settings_path = _settings_path(path)
    if not settings_path.exists():
        logger.debug(f"Settings file {settings_path} not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load settings from {settings_path}: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()

    if not isinstance(loaded, dict):
        logger.warning(f"Settings file {settings_path} is not a JSON object, using defaults")
        return DEFAULT_SETTINGS.copy()

    result = DEFAULT_SETTINGS.copy()
    for key, value in loaded.items():
        if key not in DEFAULT_SETTINGS:
            logger.warning(f"Ignoring unknown setting {key!r}")
            continue
        result[key] = value
    logger.debug(f"Settings loaded: {result}")
    return validate_settings(result)
