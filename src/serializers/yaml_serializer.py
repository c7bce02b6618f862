"""YAML serializer for typed config values.

This module stores configs as block-style YAML documents with stable key
order and four-space indentation for nested mappings.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

import yaml

from core.constants import DEFAULT_YAML_INDENT, PAYLOAD_ENCODING
from core.errors import ConfkeepDeserializationError, ConfkeepSerializationError
from serializers.payload_mapping import decode_text, from_payload, to_payload

T = TypeVar("T")


class YamlSerializer(Generic[T]):
    """Serializer that stores values as YAML documents."""

    def __init__(self, data_type: Any, indent: int = DEFAULT_YAML_INDENT) -> None:
        self._data_type = data_type
        self._indent = indent

    @property
    def data_type(self) -> Any:
        """Type that decoded documents are rebuilt into."""
        return self._data_type

    def serialize_data(self, data: T) -> bytes:
        """Encode a typed value as YAML bytes.

        Args:
            data: Config value to encode.

        Returns:
            UTF-8 encoded YAML document.

        Raises:
            ConfkeepSerializationError: If value cannot be represented.
        """
        payload = to_payload(data)
        try:
            document = yaml.safe_dump(
                payload,
                indent=self._indent,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as error:
            raise ConfkeepSerializationError(f"Failed to encode YAML config: {error}.") from error
        return document.encode(PAYLOAD_ENCODING)

    def deserialize_data(self, raw_data: bytes) -> T:
        """Decode YAML bytes into a typed value.

        Args:
            raw_data: Stored YAML document.

        Returns:
            Freshly built config value.

        Raises:
            ConfkeepDeserializationError: If document is malformed or mistyped.
        """
        text = decode_text(raw_data, "YAML")
        try:
            payload = yaml.safe_load(text)
        except yaml.YAMLError as error:
            raise ConfkeepDeserializationError(
                f"Failed to parse YAML config: {error}. Fix YAML syntax and retry."
            ) from error
        if payload is None:
            payload = {}
        return cast(T, from_payload(payload, self._data_type))
