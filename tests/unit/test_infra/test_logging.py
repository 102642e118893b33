"""Unit tests for logging configuration and the lazy logger."""
from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from keyset_pagination.core.settings import LoggingSettings
from keyset_pagination.infra.logging import (
    JSONFormatter,
    build_logging_config,
    get_lazy_logger,
    setup_logging,
)
from keyset_pagination.infra.logging import config as logging_config


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.unit
class TestBuildLoggingConfig:
    def test_plain_text(self):
        config = build_logging_config("debug", False, "%(message)s")

        assert config["formatters"]["default"] == {"format": "%(message)s"}
        assert config["root"]["level"] == "DEBUG"
        assert config["handlers"]["console"]["stream"] == "ext://sys.stderr"
        assert config["disable_existing_loggers"] is False

    def test_json(self):
        config = build_logging_config("INFO", True, "%(message)s")

        assert config["formatters"]["default"]["()"].endswith("JSONFormatter")


@pytest.mark.unit
class TestSetupLogging:
    def test_configures_once(self, monkeypatch, restore_root_logger):
        configure = MagicMock()
        monkeypatch.setattr(logging_config, "configure_logging", configure)
        monkeypatch.setattr(logging_config, "_LOGGING_INITIALIZED", False)

        setup_logging(LoggingSettings(level="DEBUG"))
        setup_logging(LoggingSettings(level="DEBUG"))

        configure.assert_called_once()
        assert configure.call_args.kwargs["log_level"] == "DEBUG"

    def test_force_reconfigures(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(logging_config, "_LOGGING_INITIALIZED", False)

        setup_logging(LoggingSettings(level="WARNING"))
        setup_logging(LoggingSettings(level="ERROR"), force=True)

        assert logging.getLogger().level == logging.ERROR


@pytest.mark.unit
class TestJSONFormatter:
    def test_format(self):
        formatter = JSONFormatter(static={"service": "pagination"})
        record = logging.LogRecord("keyset", logging.INFO, __file__, 1, "rows=%d", (3,), None)

        data = json.loads(formatter.format(record))

        assert data["message"] == "rows=3"
        assert data["level"] == "INFO"
        assert data["service"] == "pagination"
        assert data["timestamp"].endswith("Z")


@pytest.mark.unit
class TestLazyLogger:
    def test_skips_callables_when_disabled(self):
        logger = get_lazy_logger("tests.lazy.disabled")
        logger.logger.setLevel(logging.INFO)
        expensive = MagicMock(return_value="expensive")

        logger.debug(expensive)
        logger.debug("value: %s", expensive)

        expensive.assert_not_called()

    def test_evaluates_callables_when_enabled(self, caplog):
        logger = get_lazy_logger("tests.lazy.enabled")

        with caplog.at_level(logging.DEBUG, logger="tests.lazy.enabled"):
            logger.debug(lambda: "built lazily")
            logger.debug("rows: %s", lambda: 3)

        assert "built lazily" in caplog.text
        assert "rows: 3" in caplog.text
