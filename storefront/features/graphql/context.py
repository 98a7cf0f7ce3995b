"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Catalog store (for list and lookup queries)
- DataLoaders (for N+1 prevention, never shared between requests)
- Request ID (for log correlation)

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from storefront.features.catalog.store import CatalogStore
    from storefront.features.graphql.dataloaders import DataLoaders


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Standard fields (per Strawberry docs):
    - request: The HTTP request (or None for WebSocket)
    - response: The HTTP response (for setting headers/cookies)
    - background_tasks: FastAPI BackgroundTasks for async operations

    Custom fields:
    - store: Catalog store the loaders and list queries read through
    - loaders: DataLoaders created for this request only
    - request_id: Request ID assigned by RequestIDMiddleware

    Example usage in resolver:
        @strawberry.field
        async def product_by_id(self, info: Info[GraphQLContext, None], id: int) -> ProductType | None:
            product = await info.context.loaders.products.load(id)
            return ProductType.from_model(product) if product else None
    """

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    store: CatalogStore = field(default=None)  # type: ignore[assignment]
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]
    request_id: str | None = None


__all__ = ["GraphQLContext"]
