"""Dotted key path helpers for untyped config documents.

Paths such as ``server.port`` address nested mappings one key per segment.
"""

from __future__ import annotations

from typing import Any, MutableMapping

from core.errors import TransactionLogicError


def find_value(document: MutableMapping[str, Any], key_path: str) -> object:
    """Return the value stored at a dotted key path.

    Raises:
        KeyError: If any segment is absent or not a mapping.
    """
    current: object = document
    for segment in _split_key_path(key_path):
        if not isinstance(current, MutableMapping) or segment not in current:
            raise KeyError(key_path)
        current = current[segment]
    return current


def assign_value(document: MutableMapping[str, Any], key_path: str, value: object) -> None:
    """Set a value at a dotted key path, creating missing mappings.

    Raises:
        TransactionLogicError: If an intermediate segment holds a non-mapping.
    """
    segments = _split_key_path(key_path)
    parent = _walk_to_parent(document, segments, key_path, create=True)
    parent[segments[-1]] = value


def remove_value(document: MutableMapping[str, Any], key_path: str) -> None:
    """Delete the value at a dotted key path.

    Raises:
        TransactionLogicError: If the key path is absent.
    """
    segments = _split_key_path(key_path)
    parent = _walk_to_parent(document, segments, key_path, create=False)
    if segments[-1] not in parent:
        raise TransactionLogicError(f"Cannot unset '{key_path}': key not found.")
    del parent[segments[-1]]


def _walk_to_parent(
    document: MutableMapping[str, Any],
    segments: list[str],
    key_path: str,
    create: bool,
) -> MutableMapping[str, Any]:
    current = document
    for index, segment in enumerate(segments[:-1]):
        if segment not in current:
            if not create:
                raise TransactionLogicError(f"Cannot unset '{key_path}': key not found.")
            current[segment] = {}
        child = current[segment]
        if not isinstance(child, MutableMapping):
            prefix = ".".join(segments[: index + 1])
            raise TransactionLogicError(
                f"Cannot update '{key_path}': '{prefix}' holds a "
                f"{type(child).__name__} value, not a mapping."
            )
        current = child
    return current


def _split_key_path(key_path: str) -> list[str]:
    segments = key_path.split(".")
    if any(not segment for segment in segments):
        raise TransactionLogicError(
            f"Invalid key path '{key_path}'. Use dot-separated, non-empty segments."
        )
    return segments
