"""Tests for settings and logging configuration."""

import logging

import pytest
import structlog
from py_mercator.config import Settings
from py_mercator.logging_config import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.default_resolution == 64
        assert settings.default_level == 8.0
        assert settings.region_padding == 1.0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MERCATOR_DEFAULT_RESOLUTION", "16")
        monkeypatch.setenv("MERCATOR_LOG_LEVEL", "DEBUG")

        settings = Settings()
        assert settings.default_resolution == 16
        assert settings.log_level == "DEBUG"

    def test_invalid_resolution_rejected(self, monkeypatch):
        monkeypatch.setenv("MERCATOR_DEFAULT_RESOLUTION", "0")
        with pytest.raises(ValueError):
            Settings()


class TestLogging:
    """Test structlog configuration."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    @pytest.mark.parametrize("fmt", ["json", "console"])
    def test_configure(self, fmt):
        configure_logging(level="warning", fmt=fmt)

        assert structlog.is_configured()
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            configure_logging(fmt="xml")
