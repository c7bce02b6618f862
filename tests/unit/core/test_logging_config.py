"""Unit tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from core.logging_config import get_logger


def test_logger_emits_json_events(caplog: pytest.LogCaptureFixture) -> None:
    """Events should be rendered as JSON with structured fields."""
    logger = get_logger("confkeep.test")

    with caplog.at_level(logging.INFO, logger="confkeep.test"):
        logger.info("config_saved", size=12)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "config_saved"
    assert payload["size"] == 12
    assert payload["level"] == "info"
