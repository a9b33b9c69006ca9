"""Utility functions for reading and writing configuration files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

SETTINGS_FILE = "settings.yaml"
MISSING_MESSAGE = "Missing required configuration value: {}"
NOT_GIVEN = object()


def get_system_file_path(filename: str) -> Path:
    """Return the path to the configuration file for the current OS."""
    import platform

    override = os.getenv("BRACKETFLOW_CONFIG_DIR")
    if override:
        return Path(override) / filename

    os_name = platform.system()
    if os_name in {"Linux", "Darwin"}:
        return Path.home() / ".config" / "bracketflow" / filename
    elif os_name == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata is not None:
            return Path(appdata) / "bracketflow" / filename
        return Path("data") / filename
    return Path("data") / filename


def load_settings() -> Dict[str, Any]:
    """Load settings from the YAML settings file, if present."""
    settings_file = get_system_file_path(SETTINGS_FILE)

    settings: Dict[str, Any] = {}
    if settings_file.exists():
        with open(settings_file, "r") as f:
            settings = yaml.safe_load(f) or {}

    if not isinstance(settings, dict):
        raise ValueError(f"{settings_file} must contain a mapping, got {type(settings).__name__}")
    return settings


def save_settings(settings: Dict[str, Any]) -> Path:
    """Save settings to the YAML settings file and return its path."""
    settings_file = get_system_file_path(SETTINGS_FILE)
    os.makedirs(os.path.dirname(settings_file), exist_ok=True)

    with open(settings_file, "w") as f:
        yaml.safe_dump(settings, f)

    return settings_file


def get_value(
    key: str,
    settings: Dict[str, Any],
    default_env: Dict[str, Any],
    default: Any = NOT_GIVEN,
) -> Any:
    """Retrieve a configuration value from settings, the environment or defaults."""
    value = settings.get(key)
    if value is None or str(value) == "":
        value = os.environ.get(key)

    if value is None:
        value = default_env.get(key, default)

    if value is not NOT_GIVEN:
        return value
    raise KeyError(MISSING_MESSAGE.format(key))
