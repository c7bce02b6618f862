"""JSON serializer for typed config values."""

from __future__ import annotations

import json
from typing import Any, Generic, TypeVar, cast

from core.constants import PAYLOAD_ENCODING
from core.errors import ConfkeepDeserializationError, ConfkeepSerializationError
from serializers.payload_mapping import decode_text, from_payload, to_payload

T = TypeVar("T")


class JsonSerializer(Generic[T]):
    """Serializer that stores values as JSON documents.

    A positive indent pretty-prints nested values with that many spaces.
    Zero or a negative indent writes compact output.
    """

    def __init__(self, data_type: Any, indent: int = 0) -> None:
        self._data_type = data_type
        self._indent = indent

    @property
    def data_type(self) -> Any:
        """Type that decoded documents are rebuilt into."""
        return self._data_type

    def serialize_data(self, data: T) -> bytes:
        """Encode a typed value as JSON bytes.

        Raises:
            ConfkeepSerializationError: If value cannot be represented.
        """
        payload = to_payload(data)
        try:
            if self._indent > 0:
                document = json.dumps(payload, indent=self._indent, ensure_ascii=False, allow_nan=False)
            else:
                document = json.dumps(
                    payload,
                    separators=(",", ":"),
                    ensure_ascii=False,
                    allow_nan=False,
                )
        except (TypeError, ValueError) as error:
            raise ConfkeepSerializationError(f"Failed to encode JSON config: {error}.") from error
        return (document + "\n").encode(PAYLOAD_ENCODING)

    def deserialize_data(self, raw_data: bytes) -> T:
        """Decode JSON bytes into a typed value.

        Raises:
            ConfkeepDeserializationError: If document is malformed or mistyped.
        """
        text = decode_text(raw_data, "JSON")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as error:
            raise ConfkeepDeserializationError(
                f"Failed to parse JSON config at line {error.lineno} column {error.colno}: "
                f"{error.msg}. Fix JSON syntax and retry."
            ) from error
        return cast(T, from_payload(payload, self._data_type))
