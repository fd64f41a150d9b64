"""Tests for correlation ids and logging helpers."""

import logging
import re

from logsender.common.logging import (
    CorrelationFilter,
    correlation_scope,
    current_correlation,
    get_logger,
    new_span_id,
    new_trace_id,
)
from logsender.common.logging.logger import LOG_FORMAT


class TestCorrelationIds:
    """Tests for trace and span id generation."""

    def test_trace_id_format(self):
        """Test trace ids are 32 hex characters and not all zero."""
        trace_id = new_trace_id()
        assert re.fullmatch(r"[0-9a-f]{32}", trace_id)
        assert set(trace_id) != {"0"}

    def test_span_id_format(self):
        """Test span ids are 16 hex characters."""
        assert re.fullmatch(r"[0-9a-f]{16}", new_span_id())

    def test_ids_are_unique(self):
        """Test consecutive ids differ."""
        assert new_trace_id() != new_trace_id()


class TestCorrelationScope:
    """Tests for correlation_scope."""

    def test_scope_binds_and_restores(self):
        """Test the pair is bound inside the scope and cleared after."""
        assert current_correlation() == (None, None)

        with correlation_scope() as (trace_id, span_id):
            assert current_correlation() == (trace_id, span_id)

        assert current_correlation() == (None, None)

    def test_nested_scopes_restore_outer(self):
        """Test leaving a nested scope restores the outer pair."""
        with correlation_scope() as outer:
            with correlation_scope() as inner:
                assert inner != outer
                assert current_correlation() == inner
            assert current_correlation() == outer


class TestCorrelationFilter:
    """Tests for CorrelationFilter."""

    def _record(self):
        return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    def test_filter_outside_scope_uses_placeholder(self):
        """Test records outside a scope get placeholder ids."""
        record = self._record()
        assert CorrelationFilter().filter(record) is True
        assert record.trace_id == "-"
        assert record.span_id == "-"

    def test_filter_inside_scope(self):
        """Test records inside a scope carry the active ids."""
        record = self._record()
        with correlation_scope() as (trace_id, span_id):
            CorrelationFilter().filter(record)
        assert record.trace_id == trace_id
        assert record.span_id == span_id


class TestGetLogger:
    """Tests for get_logger."""

    def test_get_logger_installs_single_handler(self):
        """Test repeated calls do not stack handlers."""
        logger = get_logger("logsender.test_handlers", "DEBUG")
        get_logger("logsender.test_handlers", "DEBUG")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT
