"""Request ID middleware.

Every catalog request carries one id from the edge to the logs: it is read
from ``X-Request-ID`` (or generated), stored on ``request.state.request_id``,
echoed in the response header and in problem-details error bodies, copied
into ``GraphQLContext.request_id``, and put into the log context so loader
batch lines and store timings of the request can be grepped together.
"""

from __future__ import annotations

from storefront.app.middleware.base import HeaderContextMiddleware, generate_uuid


class RequestIDMiddleware(HeaderContextMiddleware):
    """Tag each catalog request with an id for log correlation.

    Client-supplied ids longer than ``max_value_length`` are replaced with a
    generated one. The log context is cleared when the response is done, so
    ids never leak into the next request handled by the same task.

    Usage:
        app.add_middleware(RequestIDMiddleware)
    """

    header_name = "x-request-id"
    state_key = "request_id"
    log_context_key = "request_id"
    should_clear_context_on_finish = True

    def generate_value(self) -> str:
        return generate_uuid()
