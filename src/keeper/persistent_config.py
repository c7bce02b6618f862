"""Persistent typed config holder.

This module keeps one live config value in memory and persists it through
pluggable storage and serializer adapters. Transactions apply a mutation,
persist the result, and roll the value back on any failure so memory and
storage never diverge.
"""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Callable, Generic, Iterator, Optional, TypeVar

from core.capabilities import Serializer, Storage
from core.constants import DEFAULT_CONFIG_PATH, DEFAULT_FILE_MODE
from core.errors import ConfkeepSnapshotError, ConfkeepTransactionError
from core.logging_config import get_logger
from core.settings import ConfkeepSettings
from core.types import RollbackReason, TransactionState
from keeper.rollback import RollbackGuard, take_snapshot
from serializers.format_registry import build_serializer
from serializers.yaml_serializer import YamlSerializer
from store.file_storage import FileStorage

T = TypeVar("T")

Mutation = Callable[[T], Optional[T]]

logger = get_logger(__name__)


class PersistentConfig(Generic[T]):
    """Typed config value backed by storage and a serializer.

    ``save`` and ``transaction`` share one exclusive lock, so at most one
    mutate-and-persist sequence runs at a time. ``load`` does not take the
    lock; call it before concurrent writers start or synchronize externally.

    Attributes:
        data: Live config value. Read it through the attribute each time,
            since load and rollback replace the object.
    """

    def __init__(self, default_data: T, storage: Storage, serializer: Serializer[T]) -> None:
        self.data = default_data
        self._storage = storage
        self._serializer = serializer
        self._lock = threading.Lock()
        self._owner_thread: int | None = None
        self._last_transaction_state = TransactionState.IDLE
        self._last_rollback_reason: RollbackReason | None = None

    @classmethod
    def minimal(cls, default_data: T) -> "PersistentConfig[T]":
        """Build a config stored as YAML in ``config.yaml`` under the working directory.

        Args:
            default_data: Initial value, also used to pick the decode type.

        Returns:
            Config holder; no I/O is performed.
        """
        return cls(
            default_data,
            FileStorage(DEFAULT_CONFIG_PATH, DEFAULT_FILE_MODE),
            YamlSerializer(type(default_data)),
        )

    @classmethod
    def from_settings(cls, default_data: T, settings: ConfkeepSettings) -> "PersistentConfig[T]":
        """Build a file-backed config from runtime settings.

        Args:
            default_data: Initial value, also used to pick the decode type.
            settings: Validated runtime settings.

        Returns:
            Config holder; no I/O is performed.
        """
        serializer = build_serializer(
            settings.config_format,
            type(default_data),
            json_indent=settings.json_indent,
        )
        storage = FileStorage(settings.config_path, settings.file_mode)
        return cls(default_data, storage, serializer)

    @property
    def storage(self) -> Storage:
        """Storage adapter that holds the persisted bytes."""
        return self._storage

    @property
    def serializer(self) -> Serializer[T]:
        """Serializer adapter that encodes and decodes ``data``."""
        return self._serializer

    @property
    def last_transaction_state(self) -> TransactionState:
        """State of the most recent transaction, IDLE before the first one."""
        return self._last_transaction_state

    @property
    def last_rollback_reason(self) -> RollbackReason | None:
        """Why the most recent transaction rolled back, None after a commit."""
        return self._last_rollback_reason

    def load(self) -> bool:
        """Replace ``data`` with the stored value.

        Returns:
            True if a stored value was loaded, False if storage was empty
            and ``data`` kept its current value.

        Raises:
            ConfkeepStorageError: If storage fails. ``data`` is unchanged.
            ConfkeepDeserializationError: If stored bytes are invalid.
                ``data`` is unchanged.
        """
        read_result = self._storage.load()
        if read_result.missing:
            logger.info("config_load_missing")
            return False
        self.data = self._serializer.deserialize_data(read_result.payload)
        logger.info("config_loaded", size=len(read_result.payload))
        return True

    def save(self) -> None:
        """Persist the current ``data``.

        Raises:
            ConfkeepSerializationError: If ``data`` cannot be encoded.
            ConfkeepStorageError: If storage fails.
            ConfkeepTransactionError: If called from inside a transaction.
        """
        with self._exclusive("save"):
            payload_size = self._serialize_and_store()
        logger.info("config_saved", size=payload_size)

    def transaction(self, mutate: Mutation[T]) -> T:
        """Apply a mutation to ``data`` and persist it atomically.

        The mutation edits the value in place and returns None, or returns a
        replacement value of the same type as ``data``. If the mutation
        raises, persisting fails, or the call unwinds abnormally, ``data`` is
        restored to its value from before the call and the original
        exception propagates unchanged.

        Args:
            mutate: Callable receiving the live value.

        Returns:
            The committed value.

        Raises:
            ConfkeepSnapshotError: If ``data`` cannot be copied for rollback.
            ConfkeepTransactionError: If called from inside a transaction, or
                if the mutation returns a value of another type.
        """
        with self._exclusive("start a transaction"):
            self._last_transaction_state = TransactionState.RUNNING
            self._last_rollback_reason = None
            snapshot = self._take_snapshot()
            with RollbackGuard(snapshot, self._roll_back) as guard:
                guard.enter_stage(RollbackReason.LOGIC_ERROR)
                replacement = mutate(self.data)
                if replacement is not None:
                    self.data = _checked_replacement(replacement, snapshot)
                guard.enter_stage(RollbackReason.PERSIST_ERROR)
                payload_size = self._serialize_and_store()
                guard.disarm()
            self._last_transaction_state = TransactionState.COMMITTED
            logger.info("transaction_committed", size=payload_size)
            return self.data

    def _take_snapshot(self) -> T:
        try:
            return take_snapshot(self.data)
        except ConfkeepSnapshotError:
            self._mark_rolled_back(RollbackReason.SNAPSHOT_FAILED)
            raise

    def _roll_back(self, snapshot: T, reason: RollbackReason) -> None:
        self.data = snapshot
        self._mark_rolled_back(reason)

    def _mark_rolled_back(self, reason: RollbackReason) -> None:
        self._last_transaction_state = TransactionState.ROLLED_BACK
        self._last_rollback_reason = reason
        logger.warning("transaction_rolled_back", reason=reason.value)

    def _serialize_and_store(self) -> int:
        """Encode and persist ``data``; callers must hold the lock."""
        payload = self._serializer.serialize_data(self.data)
        self._storage.save(payload)
        return len(payload)

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        """Hold the config lock, rejecting re-entry from the owning thread."""
        current_thread = threading.get_ident()
        if self._owner_thread == current_thread:
            raise ConfkeepTransactionError(
                f"Cannot {operation} while a transaction is running on this config. "
                "Return from the mutation instead; the transaction saves on commit."
            )
        with self._lock:
            self._owner_thread = current_thread
            try:
                yield
            finally:
                self._owner_thread = None


def _checked_replacement(replacement: T, snapshot: T) -> T:
    """Return a mutation's replacement value if it has the config's type."""
    expected_type = type(snapshot)
    if not isinstance(replacement, expected_type):
        raise ConfkeepTransactionError(
            f"Transaction mutation returned {type(replacement).__name__}, "
            f"expected {expected_type.__name__} or None. "
            "Return None after editing the value in place."
        )
    return replacement
