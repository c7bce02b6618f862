"""Pytest configuration for repository test runs."""

from __future__ import annotations

from pathlib import Path

import pytest

CONFKEEP_ENV_NAMES = (
    "CONFKEEP_CONFIG_PATH",
    "CONFKEEP_FORMAT",
    "CONFKEEP_JSON_INDENT",
    "CONFKEEP_FILE_MODE",
)


@pytest.fixture
def in_tmp_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with tmp_path as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def clear_confkeep_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from confkeep variables set in the shell."""
    for name in CONFKEEP_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
