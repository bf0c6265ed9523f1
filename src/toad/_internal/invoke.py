"""Invoke helpers: call sync or async callables uniformly.

Middleware, handlers and the ``before``/``after`` hooks of
``create_middleware`` can be ``def`` or ``async def``. Any code that
calls one of them goes through ``invoke`` so the sync/async check lives
in exactly one place.

Usage::

    from toad._internal.invoke import invoke

    result = await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    A sync middleware that returns ``next(...)`` hands back a coroutine;
    that is awaited here too, so the chain keeps going.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
