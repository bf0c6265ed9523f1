"""Request ID logger: hand-written middleware threading locals.

Demonstrates:
- A plain ``def`` middleware that extends locals and continues
- An ``async def`` middleware with an after-phase (timing + logging)
- Reading accumulated locals in a handler

Run:
    python app.py
"""

import logging
import time
import uuid
from typing import Any

from toad import Context, Request, Response, create_router, json_body
from toad.middleware.protocol import Next

logger = logging.getLogger("example.access")


def assign_request_id(ctx: Context[Any], next: Next) -> Any:
    """Take the id from the ``request-id`` header, or make one up."""
    rid = ctx.request.headers.get("request-id") or str(uuid.uuid4())
    return next({**ctx.locals, "request_id": rid})


async def log_request(ctx: Context[Any], next: Next) -> Response:
    """Log ``<id> <METHOD> <url> <status> <ms>ms`` once the response is back."""
    start = time.perf_counter()
    response = await next(ctx.locals)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %s %d %.3fms",
        ctx.locals["request_id"],
        ctx.request.method,
        ctx.request.url,
        response.status,
        elapsed_ms,
    )
    return response


router = (
    create_router()
    .use(assign_request_id)
    .use(log_request)
    .get("/", lambda ctx: json_body({"ok": True, "request_id": ctx.locals["request_id"]}))
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    response = router.handle_sync(Request.build("GET", "http://localhost/"))
    print(response.status, response.text)
