"""Serializer selection by format name."""

from __future__ import annotations

from typing import Any

from core.constants import DEFAULT_JSON_INDENT, JSON_FORMAT, SUPPORTED_FORMATS, YAML_FORMAT
from core.errors import ConfkeepSettingsError
from serializers.json_serializer import JsonSerializer
from serializers.yaml_serializer import YamlSerializer


def build_serializer(
    config_format: str,
    data_type: Any,
    json_indent: int = DEFAULT_JSON_INDENT,
) -> YamlSerializer[Any] | JsonSerializer[Any]:
    """Build the serializer for a named format.

    Args:
        config_format: ``yaml`` or ``json``.
        data_type: Type decoded documents are rebuilt into.
        json_indent: Indentation width used by the JSON format.

    Returns:
        Serializer instance.

    Raises:
        ConfkeepSettingsError: If the format is not supported.
    """
    if config_format == YAML_FORMAT:
        return YamlSerializer(data_type)
    if config_format == JSON_FORMAT:
        return JsonSerializer(data_type, indent=json_indent)
    supported_rows = ", ".join(SUPPORTED_FORMATS)
    raise ConfkeepSettingsError(
        f"Unsupported config format '{config_format}'. Use one of: {supported_rows}."
    )
