"""Logging infrastructure.

Structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, graphql operation, ...)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug messages
- OpenTelemetry trace correlation

Basic usage:
    from storefront.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)
    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # Automatically includes request_id
"""

from storefront.infra.logging.config import configure_logging, setup_logging, shutdown
from storefront.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from storefront.infra.logging.formatters import JSONFormatter
from storefront.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
