"""Middleware protocol, Next and Handler type aliases.

A middleware is any callable matching::

    async def my_mw(ctx: Context, next: Next) -> Response: ...

No base class required. The chain checks the shape, not the lineage.
Plain ``def`` middleware are fine too, as long as they have no
after-phase: return ``next(...)`` (the chain awaits it) or a
``Response`` to short-circuit.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from toad.context import Context
from toad.http.response import Response

type MaybeAwaitable[T] = T | Awaitable[T]

# The continuation handed to each middleware: takes the complete next
# locals value and resolves to the response of everything inside it.
type Next = Callable[[Any], Awaitable[Response]]

# A route handler: sync or async, receives the terminal Context.
type Handler = Callable[[Context[Any]], MaybeAwaitable[Response]]

# The innermost step of a chain, given the final accumulated locals.
type Terminal = Callable[[Any], MaybeAwaitable[Response]]


class Middleware(Protocol):
    """Protocol for toad middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: Context, next: Next) -> Response:
            start = time.monotonic()
            response = await next(ctx.locals)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimiter:
            async def __call__(self, ctx: Context, next: Next) -> Response:
                ...
    """

    def __call__(self, ctx: Context[Any], next: Next, /) -> MaybeAwaitable[Response]: ...
