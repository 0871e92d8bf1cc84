"""
Tests for structlog configuration.
"""

import logging
from unittest.mock import patch

import pytest
import structlog

from sitequalifier.config import MonitoringConfig
from sitequalifier.observability.logging import add_run_id, configure_logging


@pytest.fixture
def root_logger():
    """Restore the root logger after configure_logging replaced its handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestConfigureLogging:
    """Test configure_logging without touching the global structlog config."""

    def test_console_output_by_default(self, root_logger):
        with patch("structlog.configure") as configure:
            configure_logging(MonitoringConfig(log_level="warning"))

        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(handler.formatter.processors[-1], structlog.dev.ConsoleRenderer)

        kwargs = configure.call_args.kwargs
        assert kwargs["wrapper_class"] is structlog.stdlib.BoundLogger
        assert isinstance(kwargs["logger_factory"], structlog.stdlib.LoggerFactory)
        assert structlog.contextvars.merge_contextvars in kwargs["processors"]

    def test_json_output_when_requested(self, root_logger):
        with patch("structlog.configure"):
            configure_logging(MonitoringConfig(json_logs=True))

        assert isinstance(root_logger.handlers[0].formatter.processors[-1], structlog.processors.JSONRenderer)

    def test_file_output_is_json(self, root_logger, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        with patch("structlog.configure"):
            configure_logging(MonitoringConfig(log_file=str(log_file)))

        handler = root_logger.handlers[0]
        assert isinstance(handler, logging.FileHandler)
        assert handler.baseFilename == str(log_file)
        assert isinstance(handler.formatter.processors[-1], structlog.processors.JSONRenderer)


@pytest.mark.unit
class TestAddRunId:
    """Test the run_id processor."""

    def test_adds_bound_run_id(self):
        structlog.contextvars.bind_contextvars(run_id="run-123")
        try:
            assert add_run_id(None, "info", {"event": "x"}) == {"event": "x", "run_id": "run-123"}
        finally:
            structlog.contextvars.unbind_contextvars("run_id")

    def test_leaves_event_alone_without_run(self):
        assert add_run_id(None, "info", {"event": "x"}) == {"event": "x"}
