"""Prometheus metrics for monitoring with exemplar support."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry so only storefront metrics are exposed on /metrics
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# Keys per dispatched loader batch
BATCH_SIZE_BUCKETS = (1, 2, 5, 10, 20, 50, 100, 250, 500)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method"],
    registry=REGISTRY,
)

# Database metrics
database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Database query duration in seconds",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Batched loader metrics
dataloader_batches_total = Counter(
    "dataloader_batches_total",
    "Number of batch fetches dispatched by request-scoped loaders",
    ["loader"],
    registry=REGISTRY,
)

dataloader_batch_size = Histogram(
    "dataloader_batch_size",
    "Distinct keys per dispatched loader batch",
    ["loader"],
    buckets=BATCH_SIZE_BUCKETS,
    registry=REGISTRY,
)

# GraphQL metrics
graphql_errors_total = Counter(
    "graphql_errors_total",
    "GraphQL errors by category",
    ["category"],
    registry=REGISTRY,
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Error responses by problem type and HTTP status",
    ["error_type", "status_code"],
    registry=REGISTRY,
)

exceptions_unhandled_total = Counter(
    "exceptions_unhandled_total",
    "Exceptions that reached the catch-all handler",
    ["exception_type"],
    registry=REGISTRY,
)
