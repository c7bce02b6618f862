"""Unit tests for the JSON serializer."""

from __future__ import annotations

import pytest

from core.errors import ConfkeepDeserializationError, ConfkeepSerializationError
from serializers.json_serializer import JsonSerializer
from tests.config_models import AppConfig, LogLevel, ServiceConfig, SubConfig


def test_serialize_compact_when_indent_is_zero() -> None:
    """Zero indent should produce compact single-line JSON."""
    serializer = JsonSerializer(SubConfig)

    document = serializer.serialize_data(SubConfig(key1="a", key2=2)).decode("utf-8")

    assert document == '{"key1":"a","key2":2}\n'


def test_serialize_pretty_prints_with_indent() -> None:
    """A positive indent should pretty-print with that many spaces."""
    serializer = JsonSerializer(SubConfig, indent=4)

    document = serializer.serialize_data(SubConfig(key1="a", key2=2)).decode("utf-8")

    assert document == '{\n    "key1": "a",\n    "key2": 2\n}\n'


def test_roundtrip_preserves_nested_values() -> None:
    """Encoding then decoding should return an equal value."""
    serializer = JsonSerializer(ServiceConfig, indent=2)
    value = ServiceConfig(name="api", level=LogLevel.DEBUG, limits={"mem": 512}, endpoint=("h", 1))

    assert serializer.deserialize_data(serializer.serialize_data(value)) == value


def test_serialize_rejects_non_finite_floats() -> None:
    """NaN cannot be represented in strict JSON."""
    serializer = JsonSerializer(ServiceConfig)

    with pytest.raises(ConfkeepSerializationError):
        serializer.serialize_data(ServiceConfig(name="api", ratio=float("nan")))


def test_deserialize_rejects_malformed_json() -> None:
    """Syntax errors should report the failing line."""
    serializer = JsonSerializer(AppConfig)

    with pytest.raises(ConfkeepDeserializationError, match="line 1"):
        serializer.deserialize_data(b'{"stringProp": ')


def test_deserialize_rejects_type_mismatch() -> None:
    """A number where a string is declared should be rejected."""
    serializer = JsonSerializer(AppConfig)

    with pytest.raises(ConfkeepDeserializationError, match="stringProp"):
        serializer.deserialize_data(b'{"stringProp": 5}')


def test_roundtrip_preserves_bool_mapping_keys() -> None:
    """Bool keys written as JSON text should read back as bools."""
    serializer = JsonSerializer(dict[bool, int])

    document = serializer.serialize_data({True: 1, False: 0})

    assert document == b'{"true":1,"false":0}\n'
    assert serializer.deserialize_data(document) == {True: 1, False: 0}
