"""The middleware chain engine.

Runs an ordered stack of middleware as nested continuations around a
terminal step (the "onion"). Code a middleware runs before awaiting
``next`` executes outer to inner; code after it executes inner to
outer. A middleware that never calls ``next`` ends the chain there.

The engine does not catch, log or translate
exceptions, and it never looks inside ``locals``: whatever a middleware
passes to ``next`` is exactly what the next middleware (or the terminal
step) receives.
"""

from collections.abc import Sequence
from typing import Any

from toad._internal.invoke import invoke
from toad.context import Context
from toad.http.response import Response
from toad.middleware.protocol import Middleware, Terminal


async def run_chain(
    stack: Sequence[Middleware],
    terminal: Terminal,
    ctx: Context[Any],
) -> Response:
    """Run *stack* around *terminal* and return the final response.

    The chain always starts from empty locals, whatever ``ctx.locals``
    holds. Each middleware gets *ctx* with its locals replaced by the
    value the previous step passed to ``next``.

    The cursor is shared by every ``next`` of one run: calling ``next``
    twice from the same middleware continues further down the stack
    instead of re-running it.
    """
    index = 0

    async def next_(locals_: Any) -> Response:
        nonlocal index
        if index >= len(stack):
            return await invoke(terminal, locals_)
        middleware = stack[index]
        index += 1
        return await invoke(middleware, ctx.with_locals(locals_), next_)

    return await next_({})
