"""
Environment Configuration Management Module

Centralized configuration access for bracketflow through the Environment class.
Values are looked up, in order of precedence, in:

- the settings file (``settings.yaml`` in the bracketflow config directory)
- environment variables (after loading ``.env`` files with python-dotenv)
- built-in defaults (``DEFAULT_ENV``)
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from bracketflow.config.settings import (
    NOT_GIVEN,
    SETTINGS_FILE,
    get_system_file_path,
    get_value,
    load_settings,
)

DEFAULT_ENV: Dict[str, Any] = {
    "ENV": "development",
    "LOG_LEVEL": None,
    "DEBUG": None,
    "BRACKETFLOW_STRICT_TAGS": "0",
}

_FALSY = ("0", "false", "no", "off", "")


def load_dotenv_files(project_root: Optional[Path] = None) -> list[Path]:
    """Load environment variables from .env files based on current environment.

    Returns the files that were found and loaded.
    """
    from dotenv import load_dotenv

    root = project_root if project_root is not None else Path.cwd()
    env_name = os.environ.get("ENV", "development")

    # Later files override earlier ones only where the variable is still unset
    env_files = [
        root / ".env",
        root / f".env.{env_name}",
        root / f".env.{env_name}.local",
    ]

    loaded = []
    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file, override=False)
            loaded.append(env_file)
    return loaded


class Environment(object):
    """
    Manages configuration values and provides defaults and type conversions.

    Settings are read lazily on first access and cached on the class; call
    :meth:`reset` to drop the cache (tests do this between cases).
    """

    settings: Optional[Dict[str, Any]] = None

    @classmethod
    def load_settings(cls):
        load_dotenv_files()
        cls.settings = load_settings()

    @classmethod
    def get_settings(cls) -> Dict[str, Any]:
        if cls.settings is None:
            cls.load_settings()
        assert cls.settings is not None
        return cls.settings

    @classmethod
    def reset(cls):
        cls.settings = None

    @classmethod
    def get(cls, key: str, default: Any = NOT_GIVEN):
        return get_value(key, cls.get_settings(), DEFAULT_ENV, default)

    @classmethod
    def get_bool(cls, key: str, default: bool = False) -> bool:
        value = cls.get(key, None)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() not in _FALSY

    @classmethod
    def has_settings(cls):
        return get_system_file_path(SETTINGS_FILE).exists()

    @classmethod
    def get_env(cls):
        """
        The environment, e.g. "development", "test" or "production".
        """
        return cls.get("ENV")

    @classmethod
    def is_test(cls):
        return os.environ.get("PYTEST_CURRENT_TEST") is not None

    @classmethod
    def is_debug(cls) -> bool:
        return cls.get_bool("DEBUG")

    @classmethod
    def is_strict_tags(cls) -> bool:
        """Should builders reject a tag that is already registered?"""
        return cls.get_bool("BRACKETFLOW_STRICT_TAGS")

    @classmethod
    def get_log_level(cls) -> str:
        """Return desired log level string.

        Priority:
        1) LOG_LEVEL env
        2) If DEBUG env is truthy, return "DEBUG"
        3) BRACKETFLOW_LOG_LEVEL env (default "INFO")
        """
        level = os.getenv("LOG_LEVEL")
        if level:
            return str(level).upper()
        debug_env = os.getenv("DEBUG")
        if debug_env and debug_env.lower() not in _FALSY:
            return "DEBUG"
        return os.getenv("BRACKETFLOW_LOG_LEVEL", "INFO").upper()
