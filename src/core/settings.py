"""Runtime settings model for confkeep.

This module owns all environment variable parsing and validation.
Other modules consume a typed settings object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_FILE_MODE,
    DEFAULT_JSON_INDENT,
    JSON_FILE_SUFFIXES,
    JSON_FORMAT,
    SUPPORTED_FORMATS,
    YAML_FORMAT,
)
from core.errors import ConfkeepSettingsError


@dataclass(frozen=True)
class ConfkeepSettings:
    """Validated runtime settings.

    Attributes:
        config_path: File that backs the persisted configuration.
        config_format: Serialization format, ``yaml`` or ``json``.
        json_indent: Indentation width for JSON output, zero for compact.
        file_mode: Permission bits applied to written config files.
    """

    config_path: Path
    config_format: str
    json_indent: int
    file_mode: int

    @classmethod
    def from_env(cls) -> "ConfkeepSettings":
        """Build settings from process environment variables.

        Returns:
            A validated settings object.

        Raises:
            ConfkeepSettingsError: If environment values are invalid.
        """
        config_path = Path(os.getenv("CONFKEEP_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))
        config_path = config_path.expanduser().resolve()
        config_format = _parse_format(os.getenv("CONFKEEP_FORMAT"), config_path)
        json_indent = _parse_json_indent(os.getenv("CONFKEEP_JSON_INDENT", str(DEFAULT_JSON_INDENT)))
        file_mode = _parse_file_mode(os.getenv("CONFKEEP_FILE_MODE", f"{DEFAULT_FILE_MODE:o}"))
        return cls(
            config_path=config_path,
            config_format=config_format,
            json_indent=json_indent,
            file_mode=file_mode,
        )


def infer_format(config_path: Path) -> str:
    """Pick the serialization format implied by a file suffix."""
    if config_path.suffix.lower() in JSON_FILE_SUFFIXES:
        return JSON_FORMAT
    return YAML_FORMAT


def _parse_format(raw_value: str | None, config_path: Path) -> str:
    """Parse the format environment value.

    Args:
        raw_value: Raw string from environment, if set.
        config_path: Config path used to infer a default.

    Returns:
        Normalized format name.

    Raises:
        ConfkeepSettingsError: If the format is not supported.
    """
    if not raw_value:
        return infer_format(config_path)
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        supported_rows = ", ".join(SUPPORTED_FORMATS)
        raise ConfkeepSettingsError(
            f"Invalid CONFKEEP_FORMAT value '{raw_value}'. Use one of: {supported_rows}."
        )
    return normalized


def _parse_json_indent(raw_value: str) -> int:
    """Parse the JSON indent environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Non-negative indentation width.

    Raises:
        ConfkeepSettingsError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise ConfkeepSettingsError(
            "Invalid CONFKEEP_JSON_INDENT value: "
            f"expected integer, got '{raw_value}'. "
            "Set CONFKEEP_JSON_INDENT to 0 for compact output or a positive width."
        ) from error
    if indent < 0:
        raise ConfkeepSettingsError(
            f"Invalid CONFKEEP_JSON_INDENT value {indent}: width must not be negative."
        )
    return indent


def _parse_file_mode(raw_value: str) -> int:
    """Parse an octal permission string such as ``664`` or ``0o600``.

    Raises:
        ConfkeepSettingsError: If value is not an octal permission mask.
    """
    normalized = raw_value.strip().lower().removeprefix("0o")
    try:
        file_mode = int(normalized, 8)
    except ValueError as error:
        raise ConfkeepSettingsError(
            "Invalid CONFKEEP_FILE_MODE value: "
            f"expected octal permissions, got '{raw_value}'. Set it to a value like 664."
        ) from error
    if file_mode > 0o777:
        raise ConfkeepSettingsError(
            f"Invalid CONFKEEP_FILE_MODE value '{raw_value}': permissions exceed 777."
        )
    return file_mode
