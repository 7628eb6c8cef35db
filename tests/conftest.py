"""
Pytest configuration and shared fixtures.
"""

import sys
import textwrap
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from promreplay.config import ServerSettings
from promreplay.logger import logger


@pytest.fixture(autouse=True)
def clean_env_for_tests(monkeypatch):
    """Clean environment variables for test isolation.

    Ensures tests don't pick up PROMREPLAY_* settings from the developer's shell.

    This fixture is applied automatically to all tests (autouse=True).
    """
    monkeypatch.delenv("PROMREPLAY_HOST", raising=False)
    monkeypatch.delenv("PROMREPLAY_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PROMREPLAY_ACCESS_LOG", raising=False)
    monkeypatch.setattr("promreplay.config._server_settings", None)


@pytest.fixture
def registry():
    """Fresh registry so tests never touch the process-wide default."""
    return CollectorRegistry()


@pytest.fixture
def settings():
    """Server settings bound to loopback."""
    return ServerSettings(host="127.0.0.1")


@pytest.fixture
def propagate_logs(monkeypatch):
    """Let caplog see records from the promreplay logger."""
    monkeypatch.setattr(logger, "propagate", True)


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML document to a temporary config file and return its path."""

    def _write(text: str, name: str = "replay.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def simple_config_text():
    """One family, one series, plain drift."""
    return """
    port: 9101
    metrics:
      - name: requests_total
        series:
          - initial: 0
            delta: 5
            interval: 1s
    """
