"""Core constants used across confkeep modules.

This module centralizes defaults shared by storage, serializers and CLI.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config.yaml")
DEFAULT_FILE_MODE = 0o664
DEFAULT_YAML_INDENT = 4
DEFAULT_JSON_INDENT = 2
YAML_FORMAT = "yaml"
JSON_FORMAT = "json"
SUPPORTED_FORMATS = (YAML_FORMAT, JSON_FORMAT)
JSON_FILE_SUFFIXES = (".json",)
FIELD_KEY_METADATA = "key"
PAYLOAD_ENCODING = "utf-8"
TEMP_FILE_SUFFIX = ".tmp"
