"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.app.exception_handlers import configure_exception_handlers
from storefront.app.lifespan import lifespan
from storefront.app.middleware import MetricsMiddleware, RequestIDMiddleware
from storefront.app.router import setup_routers
from storefront.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Uses unified settings from core.settings for all configuration.
    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=app_settings.get_redoc_url(),
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)

    # Last added runs first: request ID wraps metrics, which wraps CORS
    if app_settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_credentials=app_settings.cors_allow_credentials,
            allow_methods=app_settings.cors_allow_methods,
            allow_headers=app_settings.cors_allow_headers,
        )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    setup_routers(app, app_settings, settings.graphql)

    return app


# Application instance for uvicorn
app = create_app()
