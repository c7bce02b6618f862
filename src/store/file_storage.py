"""Single-file config storage.

This module reads and writes one config file per storage instance.
Writes go through a temporary sibling file and an atomic replace.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

from core.constants import DEFAULT_FILE_MODE, TEMP_FILE_SUFFIX
from core.errors import ConfkeepStorageError
from core.logging_config import get_logger
from core.types import StorageReadResult

logger = get_logger(__name__)


class FileStorage:
    """Filesystem-backed config storage."""

    def __init__(self, file_path: str | Path, file_mode: int = DEFAULT_FILE_MODE) -> None:
        self._file_path = Path(file_path)
        self._file_mode = file_mode

    @property
    def file_path(self) -> Path:
        """Path of the backing config file."""
        return self._file_path

    @property
    def file_mode(self) -> int:
        """Permission bits applied to written files."""
        return self._file_mode

    def load(self) -> StorageReadResult:
        """Read the config file.

        Returns:
            File bytes, or a missing result when the file does not exist.

        Raises:
            ConfkeepStorageError: If the file exists but cannot be read.
        """
        try:
            payload = self._file_path.read_bytes()
        except FileNotFoundError:
            return StorageReadResult.missing_payload()
        except OSError as error:
            raise ConfkeepStorageError(
                f"Failed to read config file at {self._file_path}: {error}. "
                "Check the path and file permissions and retry."
            ) from error
        return StorageReadResult(payload=payload, missing=False)

    def save(self, payload: bytes) -> None:
        """Replace the config file contents.

        Args:
            payload: Bytes to persist.

        Raises:
            ConfkeepStorageError: If the file cannot be written.
        """
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            _write_atomic(self._file_path, payload, self._file_mode)
        except OSError as error:
            raise ConfkeepStorageError(
                f"Failed to write config file at {self._file_path}: {error}. "
                "Check directory permissions and free disk space."
            ) from error
        logger.debug("file_storage_saved", path=str(self._file_path), size=len(payload))


def _write_atomic(file_path: Path, payload: bytes, file_mode: int) -> None:
    """Write bytes to a temporary sibling and move it over the target."""
    fd, tmp_name = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=TEMP_FILE_SUFFIX,
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            tmp_file.write(payload)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(tmp_path, file_mode)
        os.replace(tmp_path, file_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
