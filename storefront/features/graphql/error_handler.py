"""GraphQL error classification and masking.

Errors raised intentionally for the client carry a ``code`` extension from
``ErrorCategory`` and pass through untouched. Everything else (storage
failures, loader contract violations, bugs) is logged server-side with the
full traceback and replaced by a generic message by ``MaskErrors``.

Usage:
    # In schema.py:
    MaskErrors(should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE)
"""

from __future__ import annotations

import logging
from typing import Any

from graphql import GraphQLError

from storefront.infra.metrics.prometheus import graphql_errors_total

logger = logging.getLogger(__name__)

MASKED_ERROR_MESSAGE = "Internal server error"


class ErrorCategory:
    """Error codes placed in the ``code`` extension of user-facing errors."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DEPTH_LIMIT = "DEPTH_LIMIT_EXCEEDED"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset(
    {ErrorCategory.VALIDATION, ErrorCategory.NOT_FOUND, ErrorCategory.DEPTH_LIMIT}
)


def user_error(message: str, code: str = ErrorCategory.VALIDATION, **extensions: Any) -> GraphQLError:
    """Build an error that is shown to the client as-is."""
    return GraphQLError(message, extensions={"code": code, **extensions})


def is_user_facing_error(error: GraphQLError) -> bool:
    """Determine if an error should be shown to the client unchanged.

    Parse and validation errors (no original exception, e.g. unknown fields or
    the depth limit) are user-facing, as is any error tagged with a known code.
    """
    extensions = error.extensions or {}
    if extensions.get("code") in USER_FACING_CODES:
        return True

    original = error.original_error
    if original is None:
        return True
    if isinstance(original, GraphQLError):
        return (original.extensions or {}).get("code") in USER_FACING_CODES
    return False


def should_mask_error(error: GraphQLError) -> bool:
    """``MaskErrors`` predicate: log and mask everything not user-facing."""
    if is_user_facing_error(error):
        code = (error.extensions or {}).get("code", ErrorCategory.VALIDATION)
        graphql_errors_total.labels(category=code).inc()
        return False

    graphql_errors_total.labels(category=ErrorCategory.INTERNAL).inc()
    original = error.original_error
    logger.error(
        "Unhandled GraphQL error: %s",
        error.message,
        exc_info=(type(original), original, original.__traceback__) if original else None,
        extra={"graphql_path": error.path, "error_type": type(original).__name__},
    )
    return True


__all__ = [
    "MASKED_ERROR_MESSAGE",
    "USER_FACING_CODES",
    "ErrorCategory",
    "is_user_facing_error",
    "should_mask_error",
    "user_error",
]
