"""Logging infrastructure.

Basic usage:
    import logging

    from keyset_pagination.infra.logging import get_lazy_logger, setup_logging

    setup_logging()  # once, at process start (reads LOG_* settings)

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {compile_statement()}")  # Only runs if DEBUG enabled
"""

from keyset_pagination.infra.logging.config import (
    build_logging_config,
    configure_logging,
    setup_logging,
)
from keyset_pagination.infra.logging.formatters import JSONFormatter
from keyset_pagination.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "build_logging_config",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
