"""
Settings loading and logging setup for the top-hat command-line tools.
"""
from __future__ import annotations

import copy
import logging
import os
import sys
from typing import Any, Dict, List, Union

import yaml

from .errors import InvalidParameter


# ============================================================================
# Settings
# ============================================================================

DEFAULT_SETTINGS: Dict[str, Any] = {
    "kernel": {"radius": 5},
    "morphology": {"workers": 1, "black_safe_border": True},
    "logging": {"level": "INFO"},
}


def merge_dicts(dicts: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Recursively merge mappings; later entries override earlier ones."""
    result: Dict[str, Any] = {}
    for d in dicts:
        for k, v in d.items():
            if isinstance(v, dict) and isinstance(result.get(k), dict):
                result[k] = merge_dicts([result[k], v])
            else:
                result[k] = copy.deepcopy(v)
    return result


def load_settings(path: str) -> Dict[str, Any]:
    """
    Load a YAML settings file and merge it over :data:`DEFAULT_SETTINGS`.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file, or one of its sections, is not a mapping
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Settings file must define a dictionary at the top level")
    for section in DEFAULT_SETTINGS:
        if section in data and not isinstance(data[section], dict):
            raise ValueError(f"Section '{section}' must be a dictionary, got {data[section]!r}")

    return merge_dicts([DEFAULT_SETTINGS, data])


def default_settings() -> Dict[str, Any]:
    return merge_dicts([DEFAULT_SETTINGS])


# ============================================================================
# Argument helpers
# ============================================================================

def parse_flag(value: Union[str, int, bool]) -> bool:
    """Parse a ``0``/``1`` command-line flag."""
    text = str(value).strip()
    if text == "1":
        return True
    if text == "0":
        return False
    raise InvalidParameter(f"Expected 0 or 1, got {value!r}")


def as_int(value: Any, name: str) -> int:
    """Coerce a settings value to int, rejecting floats with a fraction."""
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"{name} must be an integer, got {value!r}") from exc
    if isinstance(value, float) and number != value:
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    return number


# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """Send the package's log records to stderr as ``[LEVEL] message``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise InvalidParameter(f"Unknown log level: {level}")
        level = resolved
    elif isinstance(level, bool) or not isinstance(level, int):
        raise InvalidParameter(f"Unknown log level: {level!r}")

    package_logger = logging.getLogger("tophat2d")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger
