"""
Unit tests for LogContext propagation.
"""

import asyncio
import logging

import pytest

from src.core.logging.logger import (
    ContextFilter,
    LogContext,
    get_log_context,
    get_logging_health,
)


def filtered_record():
    record = logging.LogRecord("src.tests", logging.INFO, __file__, 1, "msg", None, None)
    ContextFilter().filter(record)
    return record


class TestLogContext:
    def test_request_id_becomes_correlation_id(self):
        with LogContext(request_id="req-1", path="/api/stats/Steve"):
            record = filtered_record()

        assert record.request_id == "req-1"
        assert record.correlation_id == "req-1"
        assert record.path == "/api/stats/Steve"

    def test_nested_context_keeps_outer_fields(self):
        """The service's inner context must not clobber the request's id."""
        with LogContext(request_id="req-1", path="/api/stats/Steve", component="api"):
            with LogContext(player="Steve", operation="get_player_stats"):
                record = filtered_record()

        assert record.request_id == "req-1"
        assert record.path == "/api/stats/Steve"
        assert record.player == "Steve"
        assert record.operation == "get_player_stats"
        assert record.component == "api"

    def test_context_reset_on_exit(self):
        with LogContext(request_id="req-1"):
            pass

        assert get_log_context().get("request_id") is None

    def test_generated_correlation_id(self):
        with LogContext(player="Steve"):
            context = get_log_context()

        assert context["correlation_id"]
        assert context["request_id"] == context["correlation_id"]

    @pytest.mark.asyncio
    async def test_tasks_inherit_context(self):
        async def read_request_id():
            return get_log_context().get("request_id")

        async with LogContext(request_id="req-7"):
            results = await asyncio.gather(read_request_id(), read_request_id())

        assert results == ["req-7", "req-7"]


class TestLoggingHealth:
    def test_logging_initialized_on_import(self):
        health = get_logging_health()

        assert health.initialized is True
        assert health.queue_max_size > 0
        assert health.records_dropped >= 0
