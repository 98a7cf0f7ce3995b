"""RFC 7807 Problem Details schema for error responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Provides a standardized way to carry machine-readable details
    of errors in HTTP responses.

    See: https://datatracker.ietf.org/doc/html/rfc7807

    Example:
        return JSONResponse(
            status_code=404,
            content=ProblemDetails(
                type="product-not-found",
                title="Not Found",
                status=404,
                detail="Product 'linen-shirt' not found",
                instance="/api/products/linen-shirt",
            ).model_dump(exclude_none=True),
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "not-found",
                "title": "Not Found",
                "status": 404,
                "detail": "Product 'linen-shirt' not found",
                "instance": "/api/products/linen-shirt",
            }
        },
        str_strip_whitespace=True,
    )


class ValidationErrorEntry(BaseModel):
    """One failed field of a request."""

    field: str = Field(description="Dotted location of the field, e.g. 'query.limit'")
    message: str = Field(description="Validation message")
    type: str = Field(description="Validation error type")
    value: Any | None = Field(default=None, description="Rejected input value")


class ValidationProblemDetails(ProblemDetails):
    """Problem Details carrying field-level validation errors."""

    errors: list[ValidationErrorEntry] = Field(default_factory=list)


__all__ = ["ProblemDetails", "ValidationErrorEntry", "ValidationProblemDetails"]
