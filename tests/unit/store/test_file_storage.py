"""Unit tests for single-file config storage."""

from __future__ import annotations

import os
import stat

import pytest

from core.errors import ConfkeepStorageError
from store.file_storage import FileStorage


def test_load_reports_missing_file(tmp_path) -> None:
    """An absent file should be reported as missing, not as an error."""
    storage = FileStorage(tmp_path / "config.yaml")

    result = storage.load()

    assert result.missing is True
    assert result.payload == b""


def test_save_then_load_returns_bytes(tmp_path) -> None:
    """Saved bytes should be returned by the next load."""
    storage = FileStorage(tmp_path / "config.yaml")

    storage.save(b"key: value\n")
    result = storage.load()

    assert result.missing is False
    assert result.payload == b"key: value\n"


def test_save_overwrites_previous_content(tmp_path) -> None:
    """A second save should replace the whole file."""
    storage = FileStorage(tmp_path / "config.yaml")
    storage.save(b"a much longer first payload\n")

    storage.save(b"short\n")

    assert (tmp_path / "config.yaml").read_bytes() == b"short\n"


def test_save_creates_parent_directories(tmp_path) -> None:
    """Missing parent directories should be created on save."""
    storage = FileStorage(tmp_path / "nested" / "dir" / "config.yaml")

    storage.save(b"x: 1\n")

    assert (tmp_path / "nested" / "dir" / "config.yaml").exists()


def test_save_applies_file_mode(tmp_path) -> None:
    """Written files should carry the configured permission bits."""
    storage = FileStorage(tmp_path / "config.yaml", file_mode=0o600)

    storage.save(b"x: 1\n")

    assert stat.S_IMODE((tmp_path / "config.yaml").stat().st_mode) == 0o600


def test_save_leaves_no_temporary_files(tmp_path) -> None:
    """Atomic writes should not leave temp siblings behind."""
    storage = FileStorage(tmp_path / "config.yaml")

    storage.save(b"x: 1\n")

    assert os.listdir(tmp_path) == ["config.yaml"]


def test_load_directory_raises_storage_error(tmp_path) -> None:
    """A directory at the config path is an error, not missing data."""
    (tmp_path / "config.yaml").mkdir()
    storage = FileStorage(tmp_path / "config.yaml")

    with pytest.raises(ConfkeepStorageError):
        storage.load()


def test_save_into_directory_path_raises_storage_error(tmp_path) -> None:
    """Replacing a directory with a file should fail cleanly."""
    (tmp_path / "config.yaml").mkdir()
    storage = FileStorage(tmp_path / "config.yaml")

    with pytest.raises(ConfkeepStorageError):
        storage.save(b"x: 1\n")

    assert sorted(os.listdir(tmp_path)) == ["config.yaml"]
