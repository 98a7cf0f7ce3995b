"""Prometheus metrics registry and collectors."""

from storefront.infra.metrics import tracking
from storefront.infra.metrics.prometheus import (
    REGISTRY,
    database_query_duration_seconds,
    dataloader_batch_size,
    dataloader_batches_total,
    errors_total,
    exceptions_unhandled_total,
    graphql_errors_total,
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)

__all__ = [
    "REGISTRY",
    "database_query_duration_seconds",
    "dataloader_batch_size",
    "dataloader_batches_total",
    "errors_total",
    "exceptions_unhandled_total",
    "graphql_errors_total",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "http_requests_total",
    "tracking",
]
