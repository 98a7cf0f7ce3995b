"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from storefront.core.settings import get_app_settings, get_graphql_settings
from storefront.features.catalog.router import router as catalog_router
from storefront.features.health.router import router as health_router
from storefront.features.metrics.router import router as metrics_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from storefront.core.settings.app import AppSettings
    from storefront.core.settings.graphql import GraphQLSettings

logger = logging.getLogger(__name__)


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    graphql_settings: GraphQLSettings | None = None,
) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
        graphql_settings: Optional override controlling GraphQL availability.
    """
    app_settings = app_settings or get_app_settings()
    graphql_settings = graphql_settings or get_graphql_settings()

    api_prefix = app_settings.api_prefix

    # Observability endpoints live outside the API prefix
    app.include_router(metrics_router)
    app.include_router(health_router)

    app.include_router(catalog_router, prefix=api_prefix)

    if graphql_settings.enabled:
        from storefront.features.graphql.router import create_graphql_router

        app.include_router(create_graphql_router(), tags=["graphql"])
        logger.info(
            "GraphQL endpoint enabled at %s (ide: %s)",
            graphql_settings.path,
            graphql_settings.get_graphql_ide() or "disabled",
        )

    logger.info(
        "Routers configured",
        extra={"api_prefix": api_prefix, "graphql_enabled": graphql_settings.enabled},
    )


__all__ = ["setup_routers"]
