"""HTTP middleware."""

from storefront.app.middleware.metrics import MetricsMiddleware
from storefront.app.middleware.request_id import RequestIDMiddleware

__all__ = ["MetricsMiddleware", "RequestIDMiddleware"]
