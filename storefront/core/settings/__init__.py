"""Modular Pydantic Settings v2 configuration.

One frozen settings model per domain (app/db/graphql/logging/catalog), each
reading its own environment prefix, plus LRU-cached loaders.

Import settings via cached loaders:
    from storefront.core.settings import get_catalog_settings

Or use unified settings for convenient access to all domains:
    from storefront.core.settings import get_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .catalog import CatalogSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_catalog_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
)
from .logs import LoggingSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "CatalogSettings",
    "DatabaseSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_catalog_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_settings",
]
