import logging

import pytest

from bracketflow.config.environment import Environment


@pytest.fixture(scope="session", autouse=True)
def _quiet_asyncio_logging():
    """Reduce noisy asyncio debug logs during tests."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Point configuration at an empty directory and drop cached settings."""
    monkeypatch.setenv("BRACKETFLOW_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("BRACKETFLOW_STRICT_TAGS", raising=False)
    monkeypatch.chdir(tmp_path)
    Environment.reset()
    yield tmp_path
    Environment.reset()


class CallLog:
    """Records calls in order so tests can assert on sequencing."""

    def __init__(self):
        self.events: list[tuple] = []

    def record(self, *event):
        self.events.append(event)

    def names(self) -> list[str]:
        return [f"{e[0]}:{e[1]}" for e in self.events]


@pytest.fixture
def call_log():
    return CallLog()

