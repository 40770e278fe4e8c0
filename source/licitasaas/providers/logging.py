"""This module sets up a centralized, context-aware logging system.

It provides a `LoggingProvider` singleton that configures and dispenses a
logger. The `ContextualFilter` uses thread-local storage to inject a
`correlation_id` into every log message, so a single HTTP request can be
followed through the resolver, the executor and the normalizer.

The chat pipeline additionally keeps an append-only trace file inside the
upload directory. It is served by a child logger so that trace lines also
reach the main handlers.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Generator
from contextlib import contextmanager
from logging import FileHandler, Filter, Formatter, Logger, LogRecord, StreamHandler, _nameToLevel, getLogger

from licitasaas.providers.config import ConfigProvider

_log_context = threading.local()

LOGGER_NAME = "licitasaas"
CHAT_TRACE_LOGGER_NAME = f"{LOGGER_NAME}.chat_trace"


class ContextualFilter(Filter):
    """A logging filter that makes a correlation ID available to the log formatter."""

    def filter(self, record: LogRecord) -> bool:
        """Adds the correlation ID to the log record from thread-local context.

        Args:
            record: The log record to be filtered.

        Returns:
            Always True to ensure the log record is processed.
        """
        record.correlation_id = getattr(_log_context, "correlation_id", None) or "-"
        return True


class LoggingProvider:
    """Provides configured logger instances for the application.

    This class uses a Singleton pattern so the handlers are attached only
    once, based on settings from the config provider.
    """

    _instance: LoggingProvider | None = None
    _logger: Logger | None = None
    _trace_logger: Logger | None = None
    _is_configured: bool = False

    def __new__(cls) -> LoggingProvider:
        """Implements the Singleton pattern.

        Returns:
            The singleton instance of the LoggingProvider.
        """
        if not cls._instance:  # pragma: no cover
            cls._instance = super().__new__(cls)
        return cls._instance

    def _configure_logger(self) -> Logger:
        """Configures the application logger. This is called only once.

        Returns:
            The configured logger instance.
        """
        logger = getLogger(LOGGER_NAME)

        if self._is_configured:  # pragma: no cover
            return logger

        config = ConfigProvider.get_config()
        log_level_str = config.LOG_LEVEL
        numeric_level = _nameToLevel.get(log_level_str.upper(), _nameToLevel["INFO"])
        logger.setLevel(numeric_level)

        if not logger.handlers:
            handler = StreamHandler(sys.stderr)
            handler.setFormatter(
                Formatter(
                    "%(asctime)s - %(name)s - [%(levelname)s] [%(correlation_id)s] - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            handler.addFilter(ContextualFilter())
            logger.addHandler(handler)

        self._is_configured = True
        logger.info(f"Logger configured with level: {log_level_str}")
        return logger

    def get_logger(self) -> Logger:
        """Returns the configured logger instance.

        The logger is configured lazily, on first use, which keeps module
        imports and test setups free of side effects.

        Returns:
            The configured logger instance.
        """
        if not self._logger:
            self._logger = self._configure_logger()
        return self._logger

    def get_chat_trace_logger(self) -> Logger:
        """Returns the logger that appends to the chat trace file.

        The trace file lives at `CHAT_TRACE_LOG_PATH` and is opened in append
        mode. Records propagate to the main application logger as well.

        Returns:
            The chat trace logger.
        """
        if self._trace_logger:
            return self._trace_logger

        self.get_logger()
        trace_logger = getLogger(CHAT_TRACE_LOGGER_NAME)
        config = ConfigProvider.get_config()
        trace_path = config.CHAT_TRACE_LOG_PATH

        if trace_path is not None and not any(isinstance(h, FileHandler) for h in trace_logger.handlers):
            trace_path.parent.mkdir(parents=True, exist_ok=True)
            handler = FileHandler(trace_path, mode="a", encoding="utf-8")
            handler.setFormatter(Formatter("[%(asctime)s] [%(correlation_id)s] %(message)s"))
            handler.addFilter(ContextualFilter())
            trace_logger.addHandler(handler)

        self._trace_logger = trace_logger
        return trace_logger

    @contextmanager
    def set_correlation_id(self, correlation_id: str) -> Generator[None, None, None]:
        """A context manager to set and automatically clear the correlation ID.

        Args:
            correlation_id: The correlation ID to set for the context.

        Yields:
            None.
        """
        try:
            _log_context.correlation_id = correlation_id
            yield
        finally:
            _log_context.correlation_id = None
