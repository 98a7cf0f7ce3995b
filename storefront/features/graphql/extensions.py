"""Strawberry extensions for the GraphQL schema.

Provides:
- Query depth limiting (``GRAPHQL_MAX_QUERY_DEPTH``, default 10)
- Masking of internal errors (see ``error_handler``)
- Introspection toggle

The schema receives factories rather than instances; Strawberry calls each
one per operation, so no extension state is shared between requests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from graphql.validation import NoSchemaIntrospectionCustomRule
from strawberry.extensions import (
    AddValidationRules,
    MaskErrors,
    QueryDepthLimiter,
    SchemaExtension,
)

from storefront.core.settings import get_graphql_settings
from storefront.features.graphql.error_handler import MASKED_ERROR_MESSAGE, should_mask_error

logger = logging.getLogger(__name__)

ExtensionFactory = Callable[[], SchemaExtension]


def get_extensions() -> list[ExtensionFactory]:
    """Get list of Strawberry extension factories for the schema.

    Returns:
        Zero-argument callables, each building a fresh extension
    """
    settings = get_graphql_settings()
    max_depth = settings.max_query_depth

    extensions: list[ExtensionFactory] = [
        lambda: QueryDepthLimiter(max_depth=max_depth),
        lambda: MaskErrors(should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE),
    ]
    if not settings.introspection_enabled:
        extensions.append(lambda: AddValidationRules([NoSchemaIntrospectionCustomRule]))

    logger.debug(
        "GraphQL extensions configured: depth limit=%d, introspection=%s",
        max_depth,
        settings.introspection_enabled,
    )
    return extensions


__all__ = ["ExtensionFactory", "get_extensions"]
