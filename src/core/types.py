"""Shared typed models.

This module defines immutable data models and state enums used by the
storage, serializer and config layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class StorageReadResult:
    """Raw bytes read from a backing store.

    Attributes:
        payload: Stored bytes, empty when missing.
        missing: True when the medium holds no data at all.
    """

    payload: bytes
    missing: bool

    @classmethod
    def missing_payload(cls) -> "StorageReadResult":
        """Build the result reported for an empty medium."""
        return cls(payload=b"", missing=True)


class TransactionState(Enum):
    """Lifecycle of a transactional mutation."""

    IDLE = "idle"
    RUNNING = "running"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class RollbackReason(Enum):
    """Failure exit that caused a transaction to roll back."""

    SNAPSHOT_FAILED = "snapshot_failed"
    LOGIC_ERROR = "logic_error"
    PERSIST_ERROR = "persist_error"
    ABNORMAL_TERMINATION = "abnormal_termination"
