"""Logging configuration setup.

Builds a ``logging.config.dictConfig`` dictionary with a single console
handler on the root logger. Library loggers (``keyset_pagination.*``)
propagate to it; nothing is attached to them directly.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

if TYPE_CHECKING:
    from keyset_pagination.core.settings.logs import LoggingSettings


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from keyset_pagination.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    log_format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    capture_warnings: bool = True,
    **kwargs: Any,
) -> None:
    """Configure the root logger with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of plain text.
        log_format: Format string for plain-text output.
        capture_warnings: Forward Python warnings to logging system.
        **kwargs: Ignored; logged at DEBUG for visibility.

    Example:
        from keyset_pagination.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    logging.config.dictConfig(build_logging_config(log_level, json_logs, log_format))


def build_logging_config(log_level: str, json_logs: bool, log_format: str) -> dict[str, Any]:
    """Return the dictConfig mapping applied by configure_logging()."""
    formatter: dict[str, Any]
    if json_logs:
        formatter = {"()": "keyset_pagination.infra.logging.formatters.JSONFormatter"}
    else:
        formatter = {"format": log_format}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["console"],
        },
    }


__all__ = ["build_logging_config", "configure_logging", "setup_logging"]
