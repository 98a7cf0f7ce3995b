"""Catalog listing settings.

Page sizes for the REST listing endpoints and default limits for the
GraphQL list fields. Environment variables use CATALOG_ prefix.
Example: CATALOG_DEFAULT_PAGE_SIZE=24, CATALOG_MAX_PAGE_SIZE=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseSettings):
    """Catalog pagination defaults.

    Attributes:
        default_page_size: REST page size when ``limit`` is not given.
        max_page_size: Largest REST ``limit`` accepted by request validation.
        graphql_product_limit: Default ``limit`` of the ``products`` query.
        graphql_taxonomy_limit: Default ``limit`` of ``categories`` and ``collections``.
    """

    default_page_size: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size when limit not specified",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum allowed page size (hard limit)",
    )
    graphql_product_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default number of products returned by the products query",
    )
    graphql_taxonomy_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default number of categories/collections returned by list queries",
    )

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> CatalogSettings:
        if self.default_page_size > self.max_page_size:
            msg = "default_page_size must not exceed max_page_size"
            raise ValueError(msg)
        return self
