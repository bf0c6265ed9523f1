"""ASGI adapter: translates ASGI scope/messages to toad types.

The only component that touches raw ASGI directly. Reads the request
body, builds a ``Request``, awaits ``Router.handle`` and sends the
``Response`` back through ``send()``.

This is where uncaught exceptions finally stop. The router itself never
converts an exception into a response; the adapter turns anything that
escapes ``handle`` into a JSON 500 and logs it.
"""

import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from toad.config import RouterConfig
from toad.http.request import Request
from toad.http.response import Response, json_body
from toad.router import Router

logger = logging.getLogger("toad.server")

type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
type Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ASGIApp:
    """Serve a ``Router`` over ASGI 3.

    Usage::

        router = create_router().get("/", lambda ctx: json_body({"ok": True}))
        app = ASGIApp(router)
        # uvicorn module:app
    """

    __slots__ = ("config", "router")

    def __init__(self, router: Router, config: RouterConfig | None = None) -> None:
        self.router = router
        self.config = config or router.config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, await _read_body(receive))
        try:
            response = await self.router.handle(request)
        except Exception as exc:
            logger.exception("Unhandled error dispatching %s %s", request.method, request.path)
            response = self._internal_error(exc)

        await send_response(response, send)

    def _internal_error(self, exc: Exception) -> Response:
        body: dict[str, str] = {"message": self.config.internal_error_message}
        if self.config.debug:
            body["error"] = f"{type(exc).__name__}: {exc}"
        return json_body(body, 500)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge ASGI lifespan events. There is nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


async def _read_body(receive: Receive) -> bytes:
    """Drain ``http.request`` messages into one body."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def send_response(response: Response, send: Send) -> None:
    """Translate a toad Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
