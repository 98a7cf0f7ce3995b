"""Logging configuration setup.

Provides logging configuration using:
- dictConfig for formatters, filters and logger levels
- QueueHandler + QueueListener for non-blocking I/O
- ContextInjectingFilter for automatic context propagation
- All handlers on root logger (child loggers propagate)
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import TYPE_CHECKING, Any

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False
logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from storefront.core.settings.logs import LoggingSettings

_TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records.

    Registered with ``atexit`` by ``configure_logging``; safe to call twice.
    """
    global _log_queue, _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from storefront.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    *,
    service_name: str = "storefront",
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    include_function_name: bool = False,
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure logging with dictConfig and the QueueHandler pattern.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Static ``service`` field added to JSON records.
        json_logs: Enable JSONL structured logging; otherwise plain text.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        include_function_name: Include function name in records.
        logger_levels: Per-logger level overrides.

    Example:
        from storefront.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    shutdown()

    if capture_warnings:
        logging.captureWarnings(True)

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {},
        "filters": {},
        "loggers": {
            name: {"level": level.upper()} for name, level in (logger_levels or {}).items()
        },
        "root": {
            "level": log_level.upper(),
            "handlers": [],
            "filters": [],
        },
    }
    if include_context:
        logging_config["filters"]["context"] = {
            "()": "storefront.infra.logging.context.ContextInjectingFilter",
        }
        logging_config["root"]["filters"].append("context")

    logging.config.dictConfig(logging_config)

    if console_enabled:
        _setup_queue_logging(
            formatter=_build_formatter(
                json_logs=json_logs,
                service_name=service_name,
                include_function_name=include_function_name,
            ),
            include_context=include_context,
        )

    logger.debug(
        "Logging configured",
        extra={"log_level": log_level.upper(), "json_logs": json_logs},
    )


def _build_formatter(
    *,
    json_logs: bool,
    service_name: str,
    include_function_name: bool,
) -> logging.Formatter:
    from storefront.infra.logging.formatters import JSONFormatter

    if json_logs:
        fmt_keys = {"level": "levelname", "logger": "name", "message": "message"}
        if include_function_name:
            fmt_keys["function"] = "funcName"
        return JSONFormatter(fmt_keys=fmt_keys, static={"service": service_name})

    fmt = _TEXT_FORMAT
    if include_function_name:
        fmt = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s - %(message)s"
    return logging.Formatter(fmt=fmt, datefmt=_TEXT_DATEFMT)


def _setup_queue_logging(*, formatter: logging.Formatter, include_context: bool) -> None:
    """Attach a QueueHandler to the root logger, drained by a QueueListener.

    The context filter also sits on the QueueHandler: records from child
    loggers bypass root-level filters, and the contextvar is only visible in
    the emitting task, not in the listener thread.
    """
    global _log_queue, _listener

    from storefront.infra.logging.context import ContextInjectingFilter

    _log_queue = Queue()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    _listener = QueueListener(_log_queue, console_handler, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    queue_handler = QueueHandler(_log_queue)
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, QueueHandler):
            root.removeHandler(handler)
    root.addHandler(queue_handler)
