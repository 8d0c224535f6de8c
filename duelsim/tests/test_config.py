"""
Tests for environment-driven settings.

Tests:
- Defaults and overrides from the environment
- Logging setup on the package logger
"""

import logging

import pytest

from ..config import LOG_FORMAT, configure_logging, get_settings


class TestSettings:
    """Tests for get_settings."""

    def test_development_defaults(self):
        settings = get_settings()

        assert settings.env == "development"
        assert settings.strict_invariants
        assert not settings.is_production
        assert settings.max_steps == 1000
        assert settings.log_level == "WARNING"

    def test_production_is_lenient(self, monkeypatch):
        monkeypatch.setenv("DUELSIM_ENV", "production")

        settings = get_settings()

        assert settings.is_production
        assert not settings.strict_invariants

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("yes", True), ("ON", True),
        ("0", False), ("false", False), ("off", False),
    ])
    def test_strict_override(self, monkeypatch, raw, expected):
        monkeypatch.setenv("DUELSIM_ENV", "production" if expected else "development")
        monkeypatch.setenv("DUELSIM_STRICT_INVARIANTS", raw)

        assert get_settings().strict_invariants is expected

    def test_unrecognized_flag_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("DUELSIM_STRICT_INVARIANTS", "maybe")

        assert get_settings().strict_invariants

    def test_max_steps(self, monkeypatch):
        monkeypatch.setenv("DUELSIM_MAX_STEPS", "50")
        assert get_settings().max_steps == 50

        monkeypatch.setenv("DUELSIM_MAX_STEPS", "lots")
        assert get_settings().max_steps == 1000

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("DUELSIM_LOG_LEVEL", "debug")

        assert get_settings().log_level == "DEBUG"

    def test_allowed_origins(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.example,http://b.example")

        assert get_settings().allowed_origins == ["http://a.example", "http://b.example"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_and_single_handler(self, package_logger):
        configure_logging("info")
        configure_logging("debug")

        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert package_logger.handlers[0].formatter._fmt == LOG_FORMAT

    def test_unknown_level_is_warning(self, package_logger):
        configure_logging("chatty")

        assert package_logger.level == logging.WARNING

    def test_default_from_environment(self, package_logger, monkeypatch):
        monkeypatch.setenv("DUELSIM_LOG_LEVEL", "error")

        configure_logging()

        assert package_logger.level == logging.ERROR
