"""
Tests for structured logging and correlation ID handling.
"""

import json
import logging
import os
import tempfile

import pytest
from unittest.mock import patch

from content_core.config import init_config
from content_core.monitoring.structured_logger import (
    CorrelationIdManager,
    JSONFormatter,
    LoggingContext,
    StructuredLogger,
    configure_logging,
    configure_logging_from_config,
    get_logger,
    with_correlation_id,
)


class TestStructuredLogger:
    """Test structured logging system."""

    @pytest.fixture
    def structured_logger(self):
        return StructuredLogger("test_logger", "test_component")

    def test_initialization(self, structured_logger):
        """Test structured logger initialization."""
        assert structured_logger.name == "test_logger"
        assert structured_logger.component == "test_component"
        assert structured_logger.logger is not None

    def test_component_defaults_to_name(self):
        assert get_logger("content_core.tests").component == "content_core.tests"

    def test_logging_with_context(self, structured_logger):
        """Test logging with additional context."""
        contextual_logger = structured_logger.with_context(record_id=5, operation="save_version")

        assert contextual_logger is not structured_logger
        assert contextual_logger.component == "test_component"
        contextual_logger.info("Saved version", version_id=6)
        contextual_logger.error("Failed", error=RuntimeError("boom"))


class TestCorrelationIdManager:
    """Test correlation ID management."""

    def teardown_method(self):
        CorrelationIdManager.clear_context()

    def test_id_generation(self):
        correlation_id = CorrelationIdManager.generate_correlation_id()
        request_id = CorrelationIdManager.generate_request_id()

        assert correlation_id != request_id

    def test_context_management(self):
        CorrelationIdManager.set_correlation_id("corr-123")
        CorrelationIdManager.set_request_id("req-456")
        CorrelationIdManager.set_user_id("user-789")

        assert CorrelationIdManager.get_correlation_id() == "corr-123"
        assert CorrelationIdManager.get_request_id() == "req-456"
        assert CorrelationIdManager.get_user_id() == "user-789"

        CorrelationIdManager.clear_context()

        assert CorrelationIdManager.get_correlation_id() is None
        assert CorrelationIdManager.get_user_id() is None

    def test_logging_context_restores_previous_values(self):
        CorrelationIdManager.set_correlation_id("outer")

        with LoggingContext(correlation_id="inner") as context:
            assert CorrelationIdManager.get_correlation_id() == "inner"
            assert CorrelationIdManager.get_request_id() == context.request_id

        assert CorrelationIdManager.get_correlation_id() == "outer"

    def test_logging_context_generates_ids(self):
        with LoggingContext() as context:
            assert context.correlation_id is not None
            assert CorrelationIdManager.get_correlation_id() == context.correlation_id

    def test_with_correlation_id_decorator(self):
        @with_correlation_id("decorated")
        def current():
            return CorrelationIdManager.get_correlation_id()

        assert current() == "decorated"
        assert CorrelationIdManager.get_correlation_id() is None


class TestLoggingConfiguration:
    """Test stdlib logging configuration."""

    def setup_method(self):
        root_logger = logging.getLogger()
        self._handlers = root_logger.handlers[:]
        self._level = root_logger.level

    def teardown_method(self):
        root_logger = logging.getLogger()
        root_logger.handlers = self._handlers
        root_logger.setLevel(self._level)

    def test_configure_logging(self):
        configure_logging("warning", json_format=False, log_format="%(levelname)s %(message)s")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert root_logger.handlers[0].formatter._fmt == "%(levelname)s %(message)s"

    def test_configure_logging_from_config(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG", "LOG_JSON": "true"}, clear=True):
                init_config(temp_dir)
                configure_logging_from_config()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)

    def test_json_formatter_includes_correlation_id(self):
        record = logging.LogRecord("content_core", logging.INFO, __file__, 10, "Saved %s", ("page",), None)

        with LoggingContext(correlation_id="corr-json"):
            entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "Saved page"
        assert entry["level"] == "info"
        assert entry["correlation_id"] == "corr-json"
