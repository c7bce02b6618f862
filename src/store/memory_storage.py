"""In-memory config storage."""

from __future__ import annotations

from core.types import StorageReadResult


class MemoryStorage:
    """Process-local storage that keeps the last saved bytes.

    The medium reports missing data until bytes are saved or provided
    at construction time.
    """

    def __init__(self, initial: bytes | None = None) -> None:
        self._payload = initial
        self._save_count = 0

    @property
    def payload(self) -> bytes | None:
        """Currently stored bytes, None when empty."""
        return self._payload

    @property
    def save_count(self) -> int:
        """Number of successful saves."""
        return self._save_count

    def load(self) -> StorageReadResult:
        if self._payload is None:
            return StorageReadResult.missing_payload()
        return StorageReadResult(payload=self._payload, missing=False)

    def save(self, payload: bytes) -> None:
        self._payload = bytes(payload)
        self._save_count += 1
