"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint at ``GRAPHQL_PATH`` (default /graphql)
- GraphQL IDE (GraphiQL, Apollo Sandbox or Pathfinder) unless disabled
- Request context with the catalog store and fresh DataLoaders
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, cast

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from strawberry.fastapi import GraphQLRouter

from storefront.core.dependencies import get_catalog_store, get_dataloaders
from storefront.core.settings import get_graphql_settings
from storefront.features.catalog.store import CatalogStore
from storefront.features.graphql.context import GraphQLContext
from storefront.features.graphql.dataloaders import DataLoaders
from storefront.features.graphql.schema import schema

logger = logging.getLogger(__name__)


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
    loaders: Annotated[DataLoaders, Depends(get_dataloaders)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Args:
        request: FastAPI request
        response: FastAPI response (for setting headers/cookies)
        background_tasks: FastAPI background tasks
        store: Catalog store from dependency
        loaders: Loader registry created for this request

    Returns:
        GraphQLContext for use in resolvers
    """
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        store=store,
        loaders=loaders,
        request_id=getattr(request.state, "request_id", None),
    )


def create_graphql_router() -> APIRouter:
    """Create GraphQL router with settings-based configuration."""
    settings = get_graphql_settings()

    graphql_app = GraphQLRouter(
        schema,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.get_graphql_ide(),
        path=settings.path,
    )

    router = APIRouter()
    router.include_router(graphql_app)
    return router


__all__ = ["create_graphql_router", "get_graphql_context"]
