"""Confkeep exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each layer raises a specific error type for debuggability.
"""

from __future__ import annotations


class ConfkeepError(Exception):
    """Base exception for all confkeep failures."""


class ConfkeepSettingsError(ConfkeepError):
    """Raised for invalid runtime settings."""


class ConfkeepStorageError(ConfkeepError):
    """Raised when a backing store fails for reasons other than missing data."""


class ConfkeepSerializationError(ConfkeepError):
    """Raised when a value cannot be encoded by a serializer."""


class ConfkeepDeserializationError(ConfkeepError):
    """Raised when bytes cannot be decoded into the target value type."""


class ConfkeepTransactionError(ConfkeepError):
    """Raised for misuse of the transactional mutation protocol."""


class TransactionLogicError(ConfkeepTransactionError):
    """Raised by caller mutations to abort a transaction."""


class ConfkeepSnapshotError(ConfkeepTransactionError):
    """Raised when the current value cannot be copied for rollback."""
