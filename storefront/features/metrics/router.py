"""Prometheus metrics endpoint.

Example scrape config:
    ```yaml
    scrape_configs:
      - job_name: 'storefront'
        static_configs:
          - targets: ['localhost:8000']
        metrics_path: '/metrics'
    ```
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from storefront.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics in text format.

    Returns metrics for scraping by Prometheus, including:
    - HTTP request metrics (rate, duration, in-progress)
    - Database query duration per statement type
    - Loader batch counts and batch sizes per loader
    - GraphQL and REST error counts
    """
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


__all__ = ["router"]
