"""Correlation ids (trace id, span id) for log records.

Ids follow the W3C trace-context rules: 16 random bytes for a trace id,
8 for a span id, hex encoded, never all zero.
"""

import contextvars
import logging
import secrets
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

NO_TRACE = "-"

_trace_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "logsender_trace_id", default=None
)
_span_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "logsender_span_id", default=None
)


def _random_hex(num_bytes: int) -> str:
    while True:
        raw = secrets.token_bytes(num_bytes)
        if any(raw):
            return raw.hex()


def new_trace_id() -> str:
    """Generate a 32 character hex trace id."""
    return _random_hex(16)


def new_span_id() -> str:
    """Generate a 16 character hex span id."""
    return _random_hex(8)


def current_correlation() -> Tuple[Optional[str], Optional[str]]:
    """Return the (trace_id, span_id) pair of the active scope."""
    return _trace_id.get(), _span_id.get()


@contextmanager
def correlation_scope() -> Iterator[Tuple[str, str]]:
    """Bind a fresh correlation pair for the duration of the block.

    Example:
        with correlation_scope() as (trace_id, span_id):
            logger.info("processing")
    """
    trace_id = new_trace_id()
    span_id = new_span_id()
    trace_token = _trace_id.set(trace_id)
    span_token = _span_id.set(span_id)
    try:
        yield trace_id, span_id
    finally:
        _span_id.reset(span_token)
        _trace_id.reset(trace_token)


class CorrelationFilter(logging.Filter):
    """Adds trace_id and span_id attributes to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        trace_id, span_id = current_correlation()
        record.trace_id = trace_id or NO_TRACE
        record.span_id = span_id or NO_TRACE
        return True
