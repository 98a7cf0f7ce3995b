"""GraphQL server configuration settings.

Controls the GraphQL endpoint, IDE, and query limits.
Environment variables use GRAPHQL_ prefix.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """GraphQL server configuration.

    Environment variables use GRAPHQL_ prefix.
    Example: GRAPHQL_ENABLED=true, GRAPHQL_PATH=/graphql
    """

    enabled: bool = Field(
        default=True,
        description="Enable GraphQL endpoint",
    )
    path: str = Field(
        default="/graphql",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="GraphQL endpoint path",
    )

    # Playground/IDE configuration (follows same pattern as docs)
    graphql_ide: GraphQLIDE = Field(
        default="graphiql",
        description="GraphQL IDE to use: graphiql, apollo-sandbox, pathfinder, or false to disable",
    )
    disable_playground: bool = Field(
        default=False,
        description="Disable GraphQL playground/IDE (like disable_docs for REST)",
    )

    # Query limits
    max_query_depth: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum query nesting depth",
    )
    max_page_size: int = Field(
        default=100,
        ge=10,
        le=1000,
        description="Upper bound applied to every list field's limit argument",
    )

    introspection_enabled: bool = Field(
        default=True,
        description="Enable GraphQL schema introspection (disable in production)",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    def get_graphql_ide(self) -> GraphQLIDE | None:
        """Get the IDE to serve, or None when the playground is disabled."""
        if self.disable_playground or self.graphql_ide is False:
            return None
        return self.graphql_ide
