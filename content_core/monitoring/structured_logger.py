"""
Structured logging with correlation IDs for the content versioning engine.

This module wraps structlog so every log line carries the component that
emitted it and, when set, the correlation and request IDs of the operation
in progress.
"""

import logging
import uuid
import time
import threading
import contextvars
import json
from enum import Enum
from typing import Optional

import structlog


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for request ID
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)

# Context variable for user ID
user_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "user_id", default=None
)

_structlog_configured = False
_configure_lock = threading.Lock()


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class CorrelationIdProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        """Add correlation and request IDs to log event."""
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        request_id = request_id_context.get()
        if request_id:
            event_dict["request_id"] = request_id

        user_id = user_id_context.get()
        if user_id:
            event_dict["user_id"] = user_id

        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        """Add timestamp to log event."""
        event_dict["timestamp"] = time.time()
        event_dict["timestamp_iso"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        return event_dict


class ContentCoreFormatter:
    """Adds the fields every content_core log line carries."""

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("level", method_name)
        event_dict["thread_name"] = threading.current_thread().name
        return event_dict


def _configure_structlog():
    """Configure structlog processors once per process."""
    global _structlog_configured
    if _structlog_configured:
        return

    with _configure_lock:
        if _structlog_configured:
            return

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                TimestampProcessor(),
                CorrelationIdProcessor(),
                ContentCoreFormatter(),
                structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _structlog_configured = True


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    Component names are bound to the underlying structlog logger, so
    several components can log through the same configuration.
    """

    def __init__(self, name: str, component: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            component: Component name for logging context
        """
        self.name = name
        self.component = component or name

        _configure_structlog()
        self.logger = structlog.get_logger(name).bind(component=self.component)

    def _log(self, level: LogLevel, message: str, **kwargs):
        getattr(self.logger, level.value)(message, **kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        if error:
            kwargs.update({"error_type": type(error).__name__, "error_message": str(error)})
        self._log(LogLevel.ERROR, message, **kwargs)

    def with_context(self, **context) -> "StructuredLogger":
        """Create a new logger with additional context."""
        new_logger = StructuredLogger(self.name, self.component)
        new_logger.logger = self.logger.bind(**context)
        return new_logger


class CorrelationIdManager:
    """Manager for correlation ID lifecycle."""

    @staticmethod
    def generate_correlation_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def set_correlation_id(correlation_id: Optional[str]):
        correlation_id_context.set(correlation_id)

    @staticmethod
    def set_request_id(request_id: Optional[str]):
        request_id_context.set(request_id)

    @staticmethod
    def set_user_id(user_id: Optional[str]):
        user_id_context.set(user_id)

    @staticmethod
    def get_correlation_id() -> Optional[str]:
        return correlation_id_context.get()

    @staticmethod
    def get_request_id() -> Optional[str]:
        return request_id_context.get()

    @staticmethod
    def get_user_id() -> Optional[str]:
        return user_id_context.get()

    @staticmethod
    def clear_context():
        """Clear all context variables."""
        correlation_id_context.set(None)
        request_id_context.set(None)
        user_id_context.set(None)


class LoggingContext:
    """Context manager for logging with correlation IDs."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        request_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        """
        Initialize logging context.

        Args:
            correlation_id: Correlation ID (generated if not provided)
            request_id: Request ID (generated if not provided)
            user_id: User ID for request
        """
        self.correlation_id = correlation_id or CorrelationIdManager.generate_correlation_id()
        self.request_id = request_id or CorrelationIdManager.generate_request_id()
        self.user_id = user_id
        self._tokens = []

    def __enter__(self):
        self._tokens = [
            (correlation_id_context, correlation_id_context.set(self.correlation_id)),
            (request_id_context, request_id_context.set(self.request_id)),
        ]
        if self.user_id:
            self._tokens.append((user_id_context, user_id_context.set(self.user_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for context_var, token in reversed(self._tokens):
            context_var.reset(token)
        self._tokens = []


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging integration."""

    def format(self, record):
        """Format log record as JSON."""
        log_entry = {
            "timestamp": record.created,
            "timestamp_iso": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        correlation_id = CorrelationIdManager.get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        request_id = CorrelationIdManager.get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        component: Component name for context

    Returns:
        Configured structured logger
    """
    return StructuredLogger(name, component)


def configure_logging(log_level: str = "INFO", json_format: bool = False, log_format: Optional[str] = None):
    """
    Configure global logging settings.

    Args:
        log_level: Minimum log level
        json_format: Whether to use JSON formatting
        log_format: Format string for plain-text output
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def configure_logging_from_config():
    """Configure global logging from the ``logging`` section of the application configuration."""
    from content_core.config import get_config

    logging_config = get_config().config.logging
    configure_logging(
        log_level=logging_config.level.value,
        json_format=logging_config.json_format,
        log_format=logging_config.format,
    )


def with_correlation_id(correlation_id: Optional[str] = None):
    """Decorator for setting correlation ID context."""

    def decorator(func):
        def wrapper(*args, **kwargs):
            with LoggingContext(correlation_id=correlation_id):
                return func(*args, **kwargs)

        return wrapper

    return decorator
