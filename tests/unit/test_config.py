"""Tests for mapfence.config module."""

from pathlib import Path

import pytest

from mapfence.config import ConfigError, Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default values are set correctly."""
        for name in ("CLOSE_THRESHOLD", "FLOOR_OPTIONS", "DEFAULT_FLOOR", "STORE_PATH"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.CLOSE_THRESHOLD == 2.0
        assert settings.FLOOR_OPTIONS == (1, 2, 3)
        assert settings.DEFAULT_FLOOR == 1
        assert settings.REJECT_PULSE_SECONDS == 0.5
        assert settings.CONFIRM_TIMEOUT_SECONDS == 0.0
        assert settings.STORE_PATH == Path("regions.json")
        assert len(settings.REGION_COLORS) == 8

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CLOSE_THRESHOLD", "3.5")
        monkeypatch.setenv("STORE_PATH", "/tmp/fence.json")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.CLOSE_THRESHOLD == 3.5
        assert settings.STORE_PATH == Path("/tmp/fence.json")

    def test_floor_options_json_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test floor options parse from JSON and come back sorted and unique."""
        monkeypatch.setenv("FLOOR_OPTIONS", "[4, 1, 2, 2]")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.FLOOR_OPTIONS == (1, 2, 4)

    def test_log_format_options(self) -> None:
        """Test that LOG_FORMAT accepts valid options."""
        settings = Settings(
            LOG_FORMAT="json",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.LOG_FORMAT == "json"


class TestRequireHelpers:
    """Tests for the require_* accessors."""

    def test_close_threshold_returned_when_positive(self) -> None:
        settings = Settings(
            CLOSE_THRESHOLD=1.25,
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.require_close_threshold() == 1.25

    def test_close_threshold_zero_raises(self) -> None:
        settings = Settings(
            CLOSE_THRESHOLD=0,
            _env_file=None,  # type: ignore[call-arg]
        )
        with pytest.raises(ConfigError, match="CLOSE_THRESHOLD") as exc_info:
            settings.require_close_threshold()
        assert exc_info.value.env_var == "CLOSE_THRESHOLD"
        assert exc_info.value.key_name == "Close threshold"

    def test_empty_palette_raises(self) -> None:
        settings = Settings(
            REGION_COLORS=(),
            _env_file=None,  # type: ignore[call-arg]
        )
        with pytest.raises(ConfigError, match="REGION_COLORS"):
            settings.require_region_colors()

    def test_palette_returned(self, test_settings: Settings) -> None:
        assert test_settings.require_region_colors()[0] == "#4a90d9"
