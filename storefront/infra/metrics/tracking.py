"""Helpers for recording error metrics from exception handlers."""

from __future__ import annotations

from storefront.infra.metrics.prometheus import errors_total, exceptions_unhandled_total


def track_error(error_type: str, status_code: int) -> None:
    """Track an error response.

    Example:
        track_error("not-found", 404)
    """
    errors_total.labels(error_type=error_type, status_code=str(status_code)).inc()


def track_unhandled_exception(exception_type: str) -> None:
    """Track an exception no specific handler claimed.

    Example:
        track_unhandled_exception("OperationalError")
    """
    exceptions_unhandled_total.labels(exception_type=exception_type).inc()


__all__ = ["track_error", "track_unhandled_exception"]
