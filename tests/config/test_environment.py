"""Tests for environment and settings resolution."""

import pytest
import yaml

from bracketflow.config.environment import Environment, load_dotenv_files
from bracketflow.config.settings import (
    SETTINGS_FILE,
    get_system_file_path,
    get_value,
    load_settings,
    save_settings,
)


class TestSettingsFile:
    def test_config_dir_override(self, isolated_environment):
        assert get_system_file_path(SETTINGS_FILE) == isolated_environment / "config" / SETTINGS_FILE

    def test_missing_file_gives_empty_settings(self):
        assert load_settings() == {}
        assert not Environment.has_settings()

    def test_save_and_load_roundtrip(self):
        path = save_settings({"BRACKETFLOW_STRICT_TAGS": True})

        assert path.exists()
        assert yaml.safe_load(path.read_text()) == {"BRACKETFLOW_STRICT_TAGS": True}
        assert load_settings() == {"BRACKETFLOW_STRICT_TAGS": True}
        assert Environment.has_settings()

    def test_non_mapping_rejected(self):
        path = get_system_file_path(SETTINGS_FILE)
        path.parent.mkdir(parents=True)
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_settings()


class TestGetValue:
    def test_precedence(self, monkeypatch):
        monkeypatch.setenv("KEY", "from-env")
        assert get_value("KEY", {"KEY": "from-settings"}, {"KEY": "default"}) == "from-settings"
        assert get_value("KEY", {}, {"KEY": "default"}) == "from-env"
        monkeypatch.delenv("KEY")
        assert get_value("KEY", {}, {"KEY": "default"}) == "default"

    def test_explicit_default(self, monkeypatch):
        monkeypatch.delenv("ABSENT_KEY", raising=False)
        assert get_value("ABSENT_KEY", {}, {}, default=None) is None

    def test_missing_raises(self, monkeypatch):
        monkeypatch.delenv("ABSENT_KEY", raising=False)
        with pytest.raises(KeyError, match="ABSENT_KEY"):
            get_value("ABSENT_KEY", {}, {})


class TestEnvironment:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)
        assert Environment.get_env() == "development"
        assert Environment.is_strict_tags() is False

    def test_strict_tags_from_env(self, monkeypatch):
        monkeypatch.setenv("BRACKETFLOW_STRICT_TAGS", "yes")
        assert Environment.is_strict_tags() is True
        monkeypatch.setenv("BRACKETFLOW_STRICT_TAGS", "off")
        assert Environment.is_strict_tags() is False

    def test_strict_tags_from_settings_file(self):
        save_settings({"BRACKETFLOW_STRICT_TAGS": True})
        Environment.reset()
        assert Environment.is_strict_tags() is True

    def test_settings_are_cached_until_reset(self):
        assert Environment.is_strict_tags() is False
        save_settings({"BRACKETFLOW_STRICT_TAGS": True})
        assert Environment.is_strict_tags() is False
        Environment.reset()
        assert Environment.is_strict_tags() is True

    def test_is_test(self):
        assert Environment.is_test()

    def test_log_level_priority(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("DEBUG", raising=False)
        monkeypatch.delenv("BRACKETFLOW_LOG_LEVEL", raising=False)
        assert Environment.get_log_level() == "INFO"

        monkeypatch.setenv("BRACKETFLOW_LOG_LEVEL", "warning")
        assert Environment.get_log_level() == "WARNING"

        monkeypatch.setenv("DEBUG", "1")
        assert Environment.get_log_level() == "DEBUG"

        monkeypatch.setenv("LOG_LEVEL", "error")
        assert Environment.get_log_level() == "ERROR"


class TestDotenv:
    def test_loads_env_files(self, isolated_environment, monkeypatch):
        for name in ("BRACKETFLOW_DOTENV_MARKER", "OTHER_MARKER"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        monkeypatch.setenv("ENV", "test")
        (isolated_environment / ".env").write_text("BRACKETFLOW_DOTENV_MARKER=base\n")
        (isolated_environment / ".env.test").write_text("OTHER_MARKER=x\n")

        loaded = load_dotenv_files(isolated_environment)

        assert loaded == [isolated_environment / ".env", isolated_environment / ".env.test"]
        assert Environment.get("BRACKETFLOW_DOTENV_MARKER") == "base"

    def test_existing_variables_win(self, isolated_environment, monkeypatch):
        monkeypatch.setenv("BRACKETFLOW_DOTENV_MARKER", "process")
        (isolated_environment / ".env").write_text("BRACKETFLOW_DOTENV_MARKER=file\n")

        load_dotenv_files(isolated_environment)

        assert Environment.get("BRACKETFLOW_DOTENV_MARKER") == "process"
