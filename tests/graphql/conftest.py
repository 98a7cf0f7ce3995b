"""GraphQL test fixtures."""

from __future__ import annotations

import pytest

from storefront.features.graphql.context import GraphQLContext
from storefront.features.graphql.dataloaders import create_dataloaders


@pytest.fixture
def graphql_context(catalog_store) -> GraphQLContext:
    """Context for ``schema.execute`` over the seeded catalog.

    Example:
        result = await schema.execute(query, context_value=graphql_context)
    """
    return GraphQLContext(store=catalog_store, loaders=create_dataloaders(catalog_store))
