"""Tests for mapfence.utils.logging module."""

from __future__ import annotations

import json
import logging

import pytest

from mapfence.utils.logging import (
    clear_correlation_context,
    configure_logging,
    get_logger,
    set_correlation_context,
)


def _read_last_json_log_line(capsys: pytest.CaptureFixture[str]) -> dict[str, object]:
    captured = capsys.readouterr()
    lines = [line for line in captured.out.splitlines() if line.strip()]
    assert lines, "Expected at least one log line on stdout"
    return json.loads(lines[-1])


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level="WARNING", log_format="console")
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_default_settings_do_not_error() -> None:
    configure_logging()


def test_get_logger_returns_logger_proxy() -> None:
    configure_logging(level="DEBUG", log_format="console")
    logger = get_logger("test.module")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "error")


def test_json_log_is_valid_and_contains_correlation_ids(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(level="INFO", log_format="json")
    set_correlation_context(
        session_id="session-1", region_id="region-9", draw_mode="playing_area"
    )

    logger = get_logger("test.json")
    logger.info("hello", foo="bar")
    payload = _read_last_json_log_line(capsys)

    assert payload["event"] == "hello"
    assert payload["foo"] == "bar"
    assert payload["session_id"] == "session-1"
    assert payload["region_id"] == "region-9"
    assert payload["draw_mode"] == "playing_area"
    assert payload["level"] == "info"
    assert payload["logger"] == "test.json"
    assert "timestamp" in payload


def test_explicit_region_id_wins_over_context(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(level="INFO", log_format="json")
    set_correlation_context(region_id="from-context")

    get_logger("test.json").info("edited", region_id="explicit")
    payload = _read_last_json_log_line(capsys)

    assert payload["region_id"] == "explicit"


def test_json_log_omits_correlation_ids_when_unset(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(level="INFO", log_format="json")
    clear_correlation_context()

    get_logger("test.json").info("hello")
    payload = _read_last_json_log_line(capsys)

    assert payload["event"] == "hello"
    assert "session_id" not in payload
    assert "region_id" not in payload
    assert "draw_mode" not in payload
