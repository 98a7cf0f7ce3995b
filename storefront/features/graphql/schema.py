"""GraphQL schema assembly.

The catalog API is read-only: a single Query root with the configured
extensions (depth limiting, error masking).
"""

from __future__ import annotations

import logging

import strawberry

from storefront.features.graphql.extensions import get_extensions
from storefront.features.graphql.resolvers import Query

logger = logging.getLogger(__name__)


def create_schema() -> strawberry.Schema:
    """Build the schema with extensions taken from the current GraphQL settings."""
    schema = strawberry.Schema(query=Query, extensions=get_extensions())
    logger.info("GraphQL schema created successfully")
    return schema


schema = create_schema()

__all__ = ["create_schema", "schema"]
