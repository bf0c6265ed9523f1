"""Errors: recovering from exceptions inside the middleware chain.

Demonstrates:
- A hand-written ``try``/``except`` around ``next`` at the top of the stack
- ``handle_errors`` scoped to a single sub-router
- ``with_response`` + ``set_header`` + ``json_response`` on the error path

Exceptions that nothing catches propagate out of ``Router.handle``;
served through ``ASGIApp`` they become a logged 500.

Run:
    python app.py
"""

import logging
from typing import Any

from toad import Context, Request, Response, Router, create_router, json_body, json_response
from toad.middleware import handle_errors, set_header, with_response
from toad.middleware.protocol import Next
from toad.server.asgi import ASGIApp

logger = logging.getLogger("example.errors")


class NotAllowed(Exception):
    pass


async def internal_error(ctx: Context[Any], next: Next) -> Response:
    try:
        return await next(ctx.locals)
    except Exception:
        logger.exception("Request failed: %s %s", ctx.request.method, ctx.request.url)
        return json_body({"error": "Internal server error"}, 500)


def forbidden(ctx: Context[Any], exc: Exception) -> Response:
    if not isinstance(exc, NotAllowed):
        raise exc
    return json_response(ctx, {"error": str(exc)}, 403)


def boom(ctx: Context[Any]) -> Response:
    raise RuntimeError("Boom")


def delete_everything(ctx: Context[Any]) -> Response:
    raise NotAllowed("Deleting everything is not allowed")


def admin(sub: Router) -> None:
    sub.use(with_response())
    sub.use(set_header(lambda ctx: ("x-area", "admin")))
    sub.use(handle_errors(forbidden))
    sub.delete("/everything", delete_everything)
    sub.get("/crash", boom)


router = (
    create_router()
    .use(internal_error)
    .get("/", boom)
    .route("/admin", admin)
)

# Without the recovering middleware: uncaught errors reach the adapter.
bare = create_router().get("/", boom)
app = ASGIApp(bare)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    for method, url in [
        ("GET", "http://localhost/"),
        ("DELETE", "http://localhost/admin/everything"),
    ]:
        response = router.handle_sync(Request.build(method, url))
        print(method, url, response.status, response.text)
