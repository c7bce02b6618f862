"""Public SDK surface for confkeep.

This module provides a stable import path for library users.
It re-exports the config holder, adapters and error types.
"""

from __future__ import annotations

from core.capabilities import Serializer, Storage
from core.errors import (
    ConfkeepDeserializationError,
    ConfkeepError,
    ConfkeepSerializationError,
    ConfkeepSettingsError,
    ConfkeepSnapshotError,
    ConfkeepStorageError,
    ConfkeepTransactionError,
    TransactionLogicError,
)
from core.settings import ConfkeepSettings
from core.types import RollbackReason, StorageReadResult, TransactionState
from keeper.persistent_config import PersistentConfig
from serializers.json_serializer import JsonSerializer
from serializers.payload_mapping import config_field
from serializers.yaml_serializer import YamlSerializer
from store.file_storage import FileStorage
from store.memory_storage import MemoryStorage

__all__ = [
    "ConfkeepDeserializationError",
    "ConfkeepError",
    "ConfkeepSerializationError",
    "ConfkeepSettings",
    "ConfkeepSettingsError",
    "ConfkeepSnapshotError",
    "ConfkeepStorageError",
    "ConfkeepTransactionError",
    "FileStorage",
    "JsonSerializer",
    "MemoryStorage",
    "PersistentConfig",
    "RollbackReason",
    "Serializer",
    "Storage",
    "StorageReadResult",
    "TransactionLogicError",
    "TransactionState",
    "YamlSerializer",
    "config_field",
]
