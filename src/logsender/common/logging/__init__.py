"""Logging helpers - configured loggers and correlation ids."""

from logsender.common.logging.correlation import (
    CorrelationFilter,
    correlation_scope,
    current_correlation,
    new_span_id,
    new_trace_id,
)
from logsender.common.logging.logger import configure_logging, get_logger

__all__ = [
    "CorrelationFilter",
    "configure_logging",
    "correlation_scope",
    "current_correlation",
    "get_logger",
    "new_span_id",
    "new_trace_id",
]
