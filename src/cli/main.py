"""Confkeep CLI entry points.
This module exposes commands that inspect and edit a persisted config file.
It maps argparse commands onto PersistentConfig operations.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import date
import json
from pathlib import Path
import sys
from typing import Any, Sequence

import yaml

from cli.key_paths import assign_value, find_value, remove_value
from core.constants import SUPPORTED_FORMATS
from core.errors import ConfkeepError
from core.settings import ConfkeepSettings, infer_format
from keeper.persistent_config import PersistentConfig

DocumentConfig = PersistentConfig[dict[str, Any]]


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="confkeep", description="Persisted config editor")
    parser.add_argument("--config", help="Override CONFKEEP_CONFIG_PATH for this command")
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        help="Override CONFKEEP_FORMAT for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("show", help="Print the stored config document")
    get_parser = subparsers.add_parser("get", help="Print the value at a dotted key path")
    get_parser.add_argument("key", help="Dotted key path, e.g. server.port")
    set_parser = subparsers.add_parser("set", help="Store a value at a dotted key path")
    set_parser.add_argument("key", help="Dotted key path, e.g. server.port")
    set_parser.add_argument("value", help="YAML scalar or flow value, e.g. 8080 or [a, b]")
    unset_parser = subparsers.add_parser("unset", help="Remove the value at a dotted key path")
    unset_parser.add_argument("key", help="Dotted key path, e.g. server.port")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the confkeep CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.config, args.format)
        config.load()
        if args.command == "show":
            return _run_show_command(config)
        if args.command == "get":
            return _run_get_command(config, args)
        if args.command == "set":
            return _run_set_command(config, args)
        if args.command == "unset":
            return _run_unset_command(config, args)
    except ConfkeepError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(config_path: str | None, config_format: str | None) -> DocumentConfig:
    """Build a document config with optional path and format overrides.

    Args:
        config_path: Optional config file override.
        config_format: Optional format override.

    Returns:
        Config holder for an untyped mapping document.
    """
    settings = ConfkeepSettings.from_env()
    if config_path:
        resolved_path = Path(config_path).expanduser().resolve()
        settings = replace(
            settings,
            config_path=resolved_path,
            config_format=infer_format(resolved_path),
        )
    if config_format:
        settings = replace(settings, config_format=config_format)
    empty_document: dict[str, Any] = {}
    return PersistentConfig.from_settings(empty_document, settings)


def _run_show_command(config: DocumentConfig) -> int:
    """Handle show command.

    Args:
        config: Loaded document config.

    Returns:
        Exit code.
    """
    rendered = config.serializer.serialize_data(config.data)
    sys.stdout.write(rendered.decode("utf-8"))
    return 0


def _run_get_command(config: DocumentConfig, args: argparse.Namespace) -> int:
    """Handle get command.

    Args:
        config: Loaded document config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        value = find_value(config.data, args.key)
    except KeyError:
        print(f"error: key '{args.key}' not found", file=sys.stderr)
        return 1
    print(_render_value(value))
    return 0


def _run_set_command(config: DocumentConfig, args: argparse.Namespace) -> int:
    """Handle set command.

    Args:
        config: Loaded document config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    value = _parse_value(args.value)
    config.transaction(lambda document: assign_value(document, args.key, value))
    return 0


def _run_unset_command(config: DocumentConfig, args: argparse.Namespace) -> int:
    """Handle unset command.

    Args:
        config: Loaded document config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    config.transaction(lambda document: remove_value(document, args.key))
    return 0


def _parse_value(raw_value: str) -> object:
    """Parse a command-line value as YAML, keeping unparsable text and dates as strings."""
    if raw_value == "":
        return ""
    try:
        parsed = yaml.safe_load(raw_value)
    except yaml.YAMLError:
        return raw_value
    if isinstance(parsed, date):
        return raw_value
    return parsed


def _render_value(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
    return json.dumps(value)
