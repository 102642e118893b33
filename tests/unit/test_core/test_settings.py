"""Unit tests for Pydantic Settings v2 configuration."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from keyset_pagination.core.settings import (
    LoggingSettings,
    PaginationSettings,
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
)


@pytest.mark.unit
class TestPaginationSettings:
    """Test suite for PaginationSettings."""

    def test_defaults(self):
        settings = PaginationSettings()

        assert settings.default_page_size == 100
        assert settings.max_page_size is None
        assert settings.strict_columns is False
        assert settings.discriminant_fallback == "id"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAGINATION_MAX_PAGE_SIZE", "250")
        monkeypatch.setenv("PAGINATION_STRICT_COLUMNS", "true")

        settings = PaginationSettings()

        assert settings.max_page_size == 250
        assert settings.strict_columns is True

    def test_frozen(self):
        settings = PaginationSettings()

        with pytest.raises(ValidationError):
            settings.default_page_size = 5

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            PaginationSettings(default_page_size=0)
        with pytest.raises(ValidationError):
            PaginationSettings(max_page_size=0)


@pytest.mark.unit
class TestLoggingSettings:
    """Test suite for LoggingSettings."""

    def test_defaults(self):
        settings = LoggingSettings()

        assert settings.level == "INFO"
        assert settings.json_logs is False

    def test_json_alias_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = LoggingSettings()

        assert settings.json_logs is True
        assert settings.level == "DEBUG"

    def test_unprefixed_json_variable_is_ignored(self, monkeypatch):
        monkeypatch.setenv("JSON", "true")

        assert LoggingSettings().json_logs is False

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_to_logging_kwargs(self):
        kwargs = LoggingSettings(level="WARNING", json_logs=True).to_logging_kwargs()

        assert kwargs["log_level"] == "WARNING"
        assert kwargs["json_logs"] is True
        assert kwargs["capture_warnings"] is True


@pytest.mark.unit
class TestLoaders:
    def test_loaders_are_cached(self):
        assert get_pagination_settings() is get_pagination_settings()
        assert get_logging_settings() is get_logging_settings()

    def test_clear_all_caches_reloads(self, monkeypatch):
        before = get_pagination_settings()
        monkeypatch.setenv("PAGINATION_DEFAULT_PAGE_SIZE", "25")

        assert get_pagination_settings() is before

        clear_all_caches()

        assert get_pagination_settings().default_page_size == 25
