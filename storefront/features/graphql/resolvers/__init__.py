"""GraphQL resolvers."""

from storefront.features.graphql.resolvers.queries import Query

__all__ = ["Query"]
