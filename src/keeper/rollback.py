"""Snapshot and restore helpers for transactional mutation.

This module copies live values before a mutation and restores the copy
on every exit path that does not explicitly commit.
"""

from __future__ import annotations

import copy
from types import TracebackType
from typing import Callable, Generic, TypeVar, cast

from core.errors import ConfkeepSnapshotError
from core.types import RollbackReason

T = TypeVar("T")


def take_snapshot(value: T) -> T:
    """Return a fully independent copy of a config value.

    Values that define a ``clone()`` method copy themselves. Everything
    else goes through ``copy.deepcopy``.

    Args:
        value: Live config value.

    Returns:
        Copy that shares no mutable state with value.

    Raises:
        ConfkeepSnapshotError: If the value cannot be copied.
    """
    clone = getattr(value, "clone", None)
    try:
        if callable(clone):
            return cast(T, clone())
        return copy.deepcopy(value)
    except Exception as error:
        raise ConfkeepSnapshotError(
            f"Failed to snapshot config value of type {type(value).__name__}: {error}. "
            "Make the value deep-copyable or give it a clone() method."
        ) from error


class RollbackGuard(Generic[T]):
    """Context manager that restores a snapshot unless disarmed.

    The guard tracks which transaction stage is running so a rollback can
    report whether the mutation, the persist step, or an abnormal unwind
    caused it. Exceptions are never suppressed.
    """

    def __init__(self, snapshot: T, restore: Callable[[T, RollbackReason], None]) -> None:
        self._snapshot = snapshot
        self._restore = restore
        self._armed = True
        self._stage = RollbackReason.LOGIC_ERROR

    @property
    def armed(self) -> bool:
        return self._armed

    def enter_stage(self, stage: RollbackReason) -> None:
        """Record the stage that a failure from now on belongs to."""
        self._stage = stage

    def disarm(self) -> None:
        """Commit: skip the restore on exit."""
        self._armed = False

    def __enter__(self) -> "RollbackGuard[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        if self._armed:
            self._restore(self._snapshot, _rollback_reason(exc_type, self._stage))
        return False


def _rollback_reason(exc_type: type[BaseException] | None, stage: RollbackReason) -> RollbackReason:
    if exc_type is not None and not issubclass(exc_type, Exception):
        return RollbackReason.ABNORMAL_TERMINATION
    return stage
