"""Shared API schemas."""

from storefront.core.schemas.problem_details import (
    ProblemDetails,
    ValidationErrorEntry,
    ValidationProblemDetails,
)

__all__ = ["ProblemDetails", "ValidationErrorEntry", "ValidationProblemDetails"]
