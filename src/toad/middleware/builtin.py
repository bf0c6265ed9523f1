"""Built-in middleware.

Locals are replaced, never mutated, so every middleware here that adds
something builds a new mapping (``{**ctx.locals, ...}``) and passes it
to ``next``. ``create_middleware`` packages that convention up for the
common "compute some values, then continue" case.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import anyio

from toad._internal.invoke import invoke
from toad.context import Context
from toad.http.response import Response, ResponseInit, json_body
from toad.middleware.protocol import MaybeAwaitable, Middleware, Next

logger = logging.getLogger("toad.middleware")

type Before = Callable[[Context[Any]], MaybeAwaitable[Mapping[str, Any] | None]]
type After = Callable[[Context[Any], Response], MaybeAwaitable[None]]
type HeaderSetter = Callable[[Context[Any]], tuple[str, str | list[str]]]
type ErrorHandler = Callable[[Context[Any], Exception], MaybeAwaitable[Response]]


def create_middleware(before: Before, after: After | None = None) -> Middleware:
    """Build a middleware from a ``before`` and an optional ``after`` hook.

    ``before(ctx)`` runs first; the mapping it returns is merged into
    the locals handed to the rest of the chain. Returning ``None`` adds
    nothing. ``after(ctx, response)`` runs once the response is back,
    with the merged locals in ``ctx``. Either hook may be ``async``.

    This router answers ``{"foo": "bar", "baz": "qux"}`` on ``/``::

        create_router()
            .use(create_middleware(lambda ctx: {"foo": "bar"}))
            .use(create_middleware(lambda ctx: {"baz": "qux"}))
            .get("/", lambda ctx: json_body(ctx.locals))
    """

    async def middleware(ctx: Context[Any], next: Next) -> Response:  # noqa: A002
        out = await invoke(before, ctx)
        merged = {**ctx.locals, **(out or {})}
        response = await next(merged)
        if after is not None:
            await invoke(after, ctx.with_locals(merged), response)
        return response

    return middleware


def with_response() -> Middleware:
    """Add (or replace) ``locals["response"]`` with fresh ``ResponseInit``.

    Pair with ``set_header``/``append_header`` and ``json_response``.
    """
    return create_middleware(lambda ctx: {"response": ResponseInit()})


def request_id(header: str = "request-id") -> Middleware:
    """Set ``locals["request_id"]`` from *header*, or a new random id."""

    def assign(ctx: Context[Any]) -> dict[str, str]:
        value = ctx.request.headers.get(header) or uuid.uuid4().hex
        return {"request_id": value}

    return create_middleware(assign)


def set_header(setter: HeaderSetter) -> Middleware:
    """Set a header on ``locals["response"].headers``, replacing it.

    *setter* receives the context and returns ``(name, value)`` where
    value is a string or a list of strings::

        create_router()
            .use(with_response())
            .use(request_id())
            .use(set_header(lambda ctx: ("request-id", ctx.locals["request_id"])))

    Requires ``with_response()`` earlier in the stack.
    """

    def middleware(ctx: Context[Any], next: Next) -> Awaitable[Response]:  # noqa: A002
        name, value = setter(ctx)
        headers = ctx.locals["response"].headers
        if isinstance(value, list):
            headers.delete(name)
            for item in value:
                headers.append(name, item)
        else:
            headers.set(name, value)
        return next(ctx.locals)

    return middleware


def append_header(setter: HeaderSetter) -> Middleware:
    """Append a header to ``locals["response"].headers``.

    Unlike ``set_header``, existing values of the same header are kept.
    Requires ``with_response()`` earlier in the stack.
    """

    def middleware(ctx: Context[Any], next: Next) -> Awaitable[Response]:  # noqa: A002
        name, value = setter(ctx)
        headers = ctx.locals["response"].headers
        for item in value if isinstance(value, list) else [value]:
            headers.append(name, item)
        return next(ctx.locals)

    return middleware


def handle_errors(handler: ErrorHandler) -> Middleware:
    """Turn exceptions raised further down the chain into a response.

    *handler* receives the context (as seen by this middleware) and the
    exception, and may be ``async``. Exceptions raised by middleware
    registered *before* this one are not caught.
    """

    async def middleware(ctx: Context[Any], next: Next) -> Response:  # noqa: A002
        try:
            return await next(ctx.locals)
        except Exception as exc:
            return await invoke(handler, ctx, exc)

    return middleware


def log_requests(log: logging.Logger | None = None) -> Middleware:
    """Log one line per request once the response is back.

    Format: ``<request id> <METHOD> <url> <status> <elapsed>ms``. The
    request id comes from ``locals["request_id"]`` (see ``request_id()``)
    and is ``-`` when absent.
    """
    log = log or logger

    async def middleware(ctx: Context[Any], next: Next) -> Response:  # noqa: A002
        start = time.perf_counter()
        response = await next(ctx.locals)
        elapsed_ms = (time.perf_counter() - start) * 1000
        rid = ctx.locals.get("request_id", "-") if isinstance(ctx.locals, Mapping) else "-"
        log.info(
            "%s %s %s %d %.3fms",
            rid,
            ctx.request.method,
            ctx.request.url,
            response.status,
            elapsed_ms,
        )
        return response

    return middleware


def timeout(seconds: float, message: str = "Gateway timeout") -> Middleware:
    """Cancel the rest of the chain after *seconds*.

    On expiry answers ``504`` with ``{"message": message}``. Only code
    that awaits can be cancelled: a handler blocking the event loop runs
    to completion.
    """

    async def middleware(ctx: Context[Any], next: Next) -> Response:  # noqa: A002
        with anyio.move_on_after(seconds):
            return await next(ctx.locals)
        logger.warning(
            "%s %s timed out after %ss", ctx.request.method, ctx.request.url, seconds
        )
        return json_body({"message": message}, 504)

    return middleware
