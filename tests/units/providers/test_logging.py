"""Unit tests for the LoggingProvider."""

from collections.abc import Generator
from logging import INFO, FileHandler, LogRecord, getLogger
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from licitasaas.providers.logging import CHAT_TRACE_LOGGER_NAME, LOGGER_NAME, ContextualFilter, LoggingProvider


def make_record() -> LogRecord:
    return LogRecord("licitasaas", INFO, __file__, 1, "message", None, None)


@pytest.fixture
def fresh_trace_logger() -> Generator[None, None, None]:
    """Detaches any trace handler before and after the test."""

    def detach() -> None:
        trace_logger = getLogger(CHAT_TRACE_LOGGER_NAME)
        for handler in list(trace_logger.handlers):
            handler.close()
            trace_logger.removeHandler(handler)
        LoggingProvider()._trace_logger = None

    detach()
    yield
    detach()


def test_contextual_filter_defaults_to_dash() -> None:
    """Tests that records outside a request get a placeholder ID."""
    record = make_record()

    assert ContextualFilter().filter(record) is True
    assert record.correlation_id == "-"


def test_set_correlation_id_scopes_the_id() -> None:
    """Tests that the correlation ID is visible only inside the context."""
    provider = LoggingProvider()
    contextual_filter = ContextualFilter()

    with provider.set_correlation_id("req-123"):
        inside = make_record()
        contextual_filter.filter(inside)

    outside = make_record()
    contextual_filter.filter(outside)

    assert inside.correlation_id == "req-123"
    assert outside.correlation_id == "-"


def test_get_logger_returns_application_logger() -> None:
    """Tests that the provider hands out the named application logger."""
    logger = LoggingProvider().get_logger()

    assert logger.name == LOGGER_NAME
    assert logger is LoggingProvider().get_logger()


def test_chat_trace_logger_appends_to_file(tmp_path: Path, fresh_trace_logger: None) -> None:
    """Tests that trace lines are appended to the configured trace file."""
    trace_path = tmp_path / "trace" / "chat-trace.log"
    trace_path.parent.mkdir()
    trace_path.write_text("previous line\n", encoding="utf-8")
    mock_config = MagicMock(LOG_LEVEL="INFO", CHAT_TRACE_LOG_PATH=trace_path)

    with patch("licitasaas.providers.logging.ConfigProvider") as mock_config_provider:
        mock_config_provider.get_config.return_value = mock_config
        provider = LoggingProvider()
        trace_logger = provider.get_chat_trace_logger()
        with provider.set_correlation_id("chat-1"):
            trace_logger.warning("Chat request received.")

    content = trace_path.read_text(encoding="utf-8")
    assert trace_logger.name == CHAT_TRACE_LOGGER_NAME
    assert content.startswith("previous line\n")
    assert "[chat-1] Chat request received." in content
    assert sum(isinstance(h, FileHandler) for h in trace_logger.handlers) == 1
