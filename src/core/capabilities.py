"""Capability contracts for pluggable backends.

Storage moves raw bytes, serializers turn typed values into bytes.
Config holders depend on these protocols, never on concrete adapters.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from core.types import StorageReadResult

T = TypeVar("T")


class Storage(Protocol):
    """Byte-level persistence contract.

    ``load`` reports an empty medium through ``missing`` and raises
    ConfkeepStorageError for every other failure.
    """

    def load(self) -> StorageReadResult: ...

    def save(self, payload: bytes) -> None: ...


class Serializer(Protocol[T]):
    """Typed value encoding contract.

    ``serialize_data`` raises ConfkeepSerializationError and
    ``deserialize_data`` raises ConfkeepDeserializationError.
    """

    def serialize_data(self, data: T) -> bytes: ...

    def deserialize_data(self, raw_data: bytes) -> T: ...
