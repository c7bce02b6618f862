"""Typed payload mapping shared by serializers.

This module converts typed config values into plain payload trees and
rebuilds typed values from parsed payloads with strict type checks.
Format adapters only deal with payload trees and bytes.
"""

from __future__ import annotations

import collections.abc
import dataclasses
from enum import Enum
import types
from typing import Any, Mapping, Union, get_args, get_origin, get_type_hints

from core.constants import FIELD_KEY_METADATA, PAYLOAD_ENCODING
from core.errors import ConfkeepDeserializationError, ConfkeepSerializationError

_SCALAR_TYPES = (str, int, float, bool)
_BOOL_KEY_TEXT = {"true": True, "false": False}
_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)
_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)


def config_field(
    key: str,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a dataclass field stored under a custom payload key.

    Args:
        key: Key used in the serialized document.
        default: Optional default value.
        default_factory: Optional zero-argument default factory.

    Returns:
        Dataclass field specification.
    """
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={FIELD_KEY_METADATA: key},
    )


def field_key(config_field_spec: dataclasses.Field[Any]) -> str:
    """Return the payload key for a dataclass field."""
    return str(config_field_spec.metadata.get(FIELD_KEY_METADATA, config_field_spec.name))


def decode_text(raw_data: bytes, format_name: str) -> str:
    """Decode stored bytes into text.

    Raises:
        ConfkeepDeserializationError: If bytes are not valid UTF-8.
    """
    try:
        return raw_data.decode(PAYLOAD_ENCODING)
    except UnicodeDecodeError as error:
        raise ConfkeepDeserializationError(
            f"Failed to decode {format_name} config: {error}. "
            f"Store config files as {PAYLOAD_ENCODING} text."
        ) from error


def to_payload(value: object, path: str = "") -> object:
    """Convert a typed value into a plain payload tree.

    Args:
        value: Dataclass, mapping, sequence, enum or scalar value.
        path: Dotted location of value, used in error messages.

    Returns:
        Payload built from dicts, lists and scalars.

    Raises:
        ConfkeepSerializationError: If the value holds unsupported data.
    """
    if isinstance(value, Enum):
        return to_payload(value.value, path)
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _dataclass_to_payload(value, path)
    if isinstance(value, Mapping):
        return {
            _payload_key(key, path): to_payload(item, _join_key(path, key))
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [to_payload(item, _join_index(path, index)) for index, item in enumerate(value)]
    raise ConfkeepSerializationError(
        f"Cannot serialize value of type {type(value).__name__} at {_describe(path)}. "
        "Config values may only hold dataclasses, mappings, lists, tuples, enums and scalars."
    )


def from_payload(payload: object, target: Any, path: str = "") -> Any:
    """Rebuild a typed value from a parsed payload tree.

    Args:
        payload: Parsed payload from a format decoder.
        target: Type annotation describing the expected value.
        path: Dotted location of payload, used in error messages.

    Returns:
        Value matching target.

    Raises:
        ConfkeepDeserializationError: If payload does not match target.
    """
    if target is Any or target is object:
        return payload
    origin = get_origin(target)
    if origin is Union or origin is types.UnionType:
        return _union_from_payload(payload, get_args(target), target, path)
    if origin is not None:
        return _generic_from_payload(payload, origin, get_args(target), target, path)
    if target is None or target is type(None):
        if payload is None:
            return None
        raise _mismatch(payload, target, path)
    if not isinstance(target, type):
        raise ConfkeepDeserializationError(
            f"Unsupported type annotation {target!r} at {_describe(path)}."
        )
    if issubclass(target, Enum):
        return _enum_from_payload(payload, target, path)
    if dataclasses.is_dataclass(target):
        return _dataclass_from_payload(payload, target, path)
    return _plain_from_payload(payload, target, path)


def _dataclass_to_payload(value: Any, path: str) -> dict[str, object]:
    payload: dict[str, object] = {}
    for spec in dataclasses.fields(value):
        if not spec.init:
            continue
        key = field_key(spec)
        payload[key] = to_payload(getattr(value, spec.name), _join_key(path, key))
    return payload


def _payload_key(key: object, path: str) -> object:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, _SCALAR_TYPES):
        return key
    raise ConfkeepSerializationError(
        f"Cannot serialize mapping key of type {type(key).__name__} at {_describe(path)}. "
        "Use string, number or boolean keys."
    )


def _dataclass_from_payload(payload: object, target: type, path: str) -> Any:
    mapping = _expect_mapping(payload, target, path)
    try:
        hints = get_type_hints(target)
    except (NameError, TypeError) as error:
        raise ConfkeepDeserializationError(
            f"Cannot resolve field types of {target.__name__}: {error}. "
            "Define config dataclasses at module level."
        ) from error
    init_values: dict[str, Any] = {}
    for spec in dataclasses.fields(target):
        if not spec.init:
            continue
        key = field_key(spec)
        key_path = _join_key(path, key)
        if key in mapping:
            init_values[spec.name] = from_payload(mapping[key], hints[spec.name], key_path)
        elif spec.default is dataclasses.MISSING and spec.default_factory is dataclasses.MISSING:
            raise ConfkeepDeserializationError(
                f"Missing required key at {_describe(key_path)}. Add it to the config document."
            )
    try:
        return target(**init_values)
    except (TypeError, ValueError) as error:
        raise ConfkeepDeserializationError(
            f"Failed to build {target.__name__} at {_describe(path)}: {error}."
        ) from error


def _enum_from_payload(payload: object, target: type[Enum], path: str) -> Enum:
    try:
        return target(payload)
    except ValueError as error:
        allowed_rows = ", ".join(repr(member.value) for member in target)
        raise ConfkeepDeserializationError(
            f"Invalid value at {_describe(path)}: {payload!r} is not one of {allowed_rows}."
        ) from error


def _plain_from_payload(payload: object, target: type, path: str) -> Any:
    if target is bool:
        if isinstance(payload, bool):
            return payload
        raise _mismatch(payload, target, path)
    if target is int:
        if isinstance(payload, int) and not isinstance(payload, bool):
            return payload
        raise _mismatch(payload, target, path)
    if target is float:
        if isinstance(payload, (int, float)) and not isinstance(payload, bool):
            return float(payload)
        raise _mismatch(payload, target, path)
    if target is str:
        if isinstance(payload, str):
            return payload
        raise _mismatch(payload, target, path)
    if issubclass(target, collections.abc.Mapping):
        return _mapping_from_payload(payload, Any, Any, target, path)
    if target in (list, tuple):
        items = _expect_list(payload, target, path)
        return target(from_payload(item, Any, _join_index(path, index)) for index, item in enumerate(items))
    raise ConfkeepDeserializationError(
        f"Unsupported field type {target.__name__} at {_describe(path)}."
    )


def _generic_from_payload(
    payload: object,
    origin: Any,
    args: tuple[Any, ...],
    target: Any,
    path: str,
) -> Any:
    if origin in _MAPPING_ORIGINS:
        key_type, value_type = args if args else (Any, Any)
        return _mapping_from_payload(payload, key_type, value_type, target, path)
    if origin in _SEQUENCE_ORIGINS:
        item_type = args[0] if args else Any
        items = _expect_list(payload, target, path)
        return [
            from_payload(item, item_type, _join_index(path, index))
            for index, item in enumerate(items)
        ]
    if origin is tuple:
        return _tuple_from_payload(payload, args, target, path)
    raise ConfkeepDeserializationError(
        f"Unsupported type annotation {_type_name(target)} at {_describe(path)}."
    )


def _tuple_from_payload(payload: object, args: tuple[Any, ...], target: Any, path: str) -> tuple[Any, ...]:
    items = _expect_list(payload, target, path)
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(
            from_payload(item, args[0], _join_index(path, index)) for index, item in enumerate(items)
        )
    if len(items) != len(args):
        raise ConfkeepDeserializationError(
            f"Invalid value at {_describe(path)}: expected {len(args)} items, got {len(items)}."
        )
    return tuple(
        from_payload(item, item_type, _join_index(path, index))
        for index, (item, item_type) in enumerate(zip(items, args))
    )


def _mapping_from_payload(
    payload: object,
    key_type: Any,
    value_type: Any,
    target: Any,
    path: str,
) -> dict[Any, Any]:
    mapping = _expect_mapping(payload, target, path)
    result: dict[Any, Any] = {}
    for raw_key, item in mapping.items():
        key_path = _join_key(path, raw_key)
        key = from_payload(_coerce_key(raw_key, key_type), key_type, key_path)
        result[key] = from_payload(item, value_type, key_path)
    return result


def _coerce_key(raw_key: object, key_type: Any) -> object:
    """Turn text keys into numbers or booleans for formats that only store string keys."""
    if key_type is bool and isinstance(raw_key, str):
        return _BOOL_KEY_TEXT.get(raw_key, raw_key)
    if key_type in (int, float) and isinstance(raw_key, str):
        try:
            return key_type(raw_key)
        except ValueError:
            return raw_key
    return raw_key


def _union_from_payload(payload: object, arms: tuple[Any, ...], target: Any, path: str) -> Any:
    for arm in arms:
        try:
            return from_payload(payload, arm, path)
        except ConfkeepDeserializationError:
            continue
    raise _mismatch(payload, target, path)


def _expect_mapping(payload: object, target: Any, path: str) -> Mapping[Any, object]:
    if isinstance(payload, Mapping):
        return payload
    raise _mismatch(payload, target, path)


def _expect_list(payload: object, target: Any, path: str) -> list[object]:
    if isinstance(payload, list):
        return payload
    raise _mismatch(payload, target, path)


def _mismatch(payload: object, target: Any, path: str) -> ConfkeepDeserializationError:
    shown_value = f" {payload!r}" if isinstance(payload, _SCALAR_TYPES) else ""
    return ConfkeepDeserializationError(
        f"Invalid value at {_describe(path)}: expected {_type_name(target)}, "
        f"got {type(payload).__name__}{shown_value}."
    )


def _type_name(target: Any) -> str:
    if target is None or target is type(None):
        return "None"
    if isinstance(target, type) and get_origin(target) is None:
        return target.__name__
    return str(target).replace("typing.", "")


def _join_key(path: str, key: object) -> str:
    return f"{path}.{key}" if path else str(key)


def _join_index(path: str, index: int) -> str:
    return f"{path}[{index}]"


def _describe(path: str) -> str:
    return f"'{path}'" if path else "document root"
