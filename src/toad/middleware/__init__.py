"""Middleware: protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: Context, next: Next) -> Response

Built-in middleware:
    create_middleware -- Merge computed values into locals, with an optional after hook
    with_response -- Prepare mutable response headers in locals
    request_id -- Assign a request id from a header or a fresh uuid
    set_header / append_header -- Write prepared response headers
    handle_errors -- Convert downstream exceptions into a response
    log_requests -- One log line per request
    timeout -- Cancel slow requests with a 504
"""

from toad.middleware.builtin import (
    append_header,
    create_middleware,
    handle_errors,
    log_requests,
    request_id,
    set_header,
    timeout,
    with_response,
)
from toad.middleware.chain import run_chain
from toad.middleware.protocol import Handler, Middleware, Next

__all__ = [
    "Handler",
    "Middleware",
    "Next",
    "append_header",
    "create_middleware",
    "handle_errors",
    "log_requests",
    "request_id",
    "run_chain",
    "set_header",
    "timeout",
    "with_response",
]
