"""Centralized logging configuration."""

import logging

from logsender.common.logging.correlation import CorrelationFilter

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(trace_id)s,%(span_id)s] - %(message)s"
)


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationFilter())
    return handler


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    if not logger.handlers:
        logger.addHandler(_build_handler())

    return logger


def configure_logging(level: str = "INFO") -> None:
    """Configure the logsender package logger.

    Module loggers created with logging.getLogger(__name__) propagate to it.
    """
    get_logger("logsender", level)
