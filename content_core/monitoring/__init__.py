"""
Monitoring module for the content versioning engine.

This module provides structured logging with correlation ID tracking.
"""

from .structured_logger import (
    StructuredLogger,
    CorrelationIdManager,
    LoggingContext,
    JSONFormatter,
    get_logger,
    configure_logging,
    configure_logging_from_config,
    with_correlation_id,
)

__all__ = [
    "StructuredLogger",
    "CorrelationIdManager",
    "LoggingContext",
    "JSONFormatter",
    "get_logger",
    "configure_logging",
    "configure_logging_from_config",
    "with_correlation_id",
]
