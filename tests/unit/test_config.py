"""
Unit tests for configuration and logging setup.

Settings are read from DEFERRED_RAILWAY_* environment variables; the
autouse fixture in conftest clears the settings cache between tests.
"""

from __future__ import annotations

import pytest
import structlog
from pydantic import ValidationError
from structlog.testing import capture_logs

from deferred_railway import Outcome
from deferred_railway.config import RailwaySettings, get_settings
from deferred_railway.log_setup import configure_from_settings, configure_structlog


class TestRailwaySettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("LOG_LEVEL", "JSON_LOGS", "TRACE_STEPS"):
            monkeypatch.delenv(f"DEFERRED_RAILWAY_{name}", raising=False)
        settings = RailwaySettings()
        assert settings.log_level == "INFO"
        assert settings.json_logs is False
        assert settings.trace_steps is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN DEFERRED_RAILWAY_* variables in the environment
        WHEN settings are loaded
        THEN the values are parsed and the level is upper-cased.
        """
        monkeypatch.setenv("DEFERRED_RAILWAY_LOG_LEVEL", "debug")
        monkeypatch.setenv("DEFERRED_RAILWAY_JSON_LOGS", "true")
        monkeypatch.setenv("DEFERRED_RAILWAY_TRACE_STEPS", "1")
        settings = RailwaySettings()
        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True
        assert settings.trace_steps is True

    def test_rejects_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFERRED_RAILWAY_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError, match="Unknown log level"):
            RailwaySettings()

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    @pytest.mark.asyncio
    async def test_trace_steps_setting_reaches_the_drain(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFERRED_RAILWAY_TRACE_STEPS", "true")
        with capture_logs() as logs:
            await Outcome.of(1).on_success(lambda x: None).get_or_raise()
        assert any(e["event"] == "outcome.step_applied" for e in logs)

    @pytest.mark.asyncio
    async def test_bad_settings_do_not_settle_the_outcome(
        self, monkeypatch: pytest.MonkeyPatch, calls: list[str]
    ) -> None:
        """
        GIVEN an invalid DEFERRED_RAILWAY_LOG_LEVEL
        WHEN a terminal read fails to load settings and the environment is then fixed
        THEN the outcome was never settled and the next read drains it normally.
        """
        monkeypatch.setenv("DEFERRED_RAILWAY_LOG_LEVEL", "verbose")
        outcome = Outcome.of(1).map(lambda x: calls.append("map") or x + 1)

        with pytest.raises(ValidationError):
            await outcome.get_or_default(0)
        assert not outcome.is_settled()
        assert calls == []

        monkeypatch.delenv("DEFERRED_RAILWAY_LOG_LEVEL")
        get_settings.cache_clear()
        assert await outcome.get_or_default(0) == 2
        assert calls == ["map"]

    def test_dotenv_in_working_directory_is_ignored(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path
    ) -> None:
        monkeypatch.delenv("DEFERRED_RAILWAY_TRACE_STEPS", raising=False)
        (tmp_path / ".env").write_text("DEFERRED_RAILWAY_TRACE_STEPS=true\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert RailwaySettings().trace_steps is False


class TestConfigureStructlog:
    """Verify structlog configuration functions."""

    def test_console_configuration(self) -> None:
        configure_structlog("WARNING")
        assert structlog.is_configured()
        assert structlog.get_logger() is not None

    def test_json_configuration(self) -> None:
        configure_structlog("INFO", json=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_invalid_level_falls_back(self) -> None:
        """
        GIVEN an invalid log_level string
        WHEN configure_structlog is called
        THEN it falls back to INFO (no crash).
        """
        configure_structlog("NONEXISTENT")
        assert structlog.is_configured()

    def test_configure_from_settings(self) -> None:
        configure_from_settings(RailwaySettings(log_level="ERROR", json_logs=True))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
