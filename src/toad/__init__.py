"""Toad: an in-process HTTP request dispatcher.

Selects a handler by method and path, runs an ordered "onion" of
middleware around it, and returns a response. No sockets involved:
an ASGI server (or anything else) hands it a request and sends back
whatever it returns.

Basic usage::

    from toad import Request, create_middleware, create_router, json_body

    router = (
        create_router()
        .use(create_middleware(lambda ctx: {"greeting": "hello"}))
        .get("/hello/:name", lambda ctx: json_body(
            {"message": f"{ctx.locals['greeting']}, {ctx.parameters['name']}"}
        ))
    )

    response = await router.handle(Request.build("GET", "http://example.com/hello/toad"))

Serving over ASGI::

    from toad.server.asgi import ASGIApp
    app = ASGIApp(router)
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "Context",
    "Headers",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "Router",
    "RouterConfig",
    "RoutingInvariantError",
    "ToadError",
    "create_middleware",
    "create_router",
    "json_body",
    "json_response",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import toad`` fast while providing a clean top-level API.
    """
    if name in ("Router", "create_router"):
        from toad import router as _router

        return getattr(_router, name)

    if name == "RouterConfig":
        from toad.config import RouterConfig

        return RouterConfig

    if name == "Context":
        from toad.context import Context

        return Context

    if name == "Request":
        from toad.http.request import Request

        return Request

    if name == "Headers":
        from toad.http.headers import Headers

        return Headers

    if name in ("Response", "json_body", "json_response"):
        from toad.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from toad.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "create_middleware":
        from toad.middleware.builtin import create_middleware

        return create_middleware

    if name in ("ConfigurationError", "RoutingInvariantError", "ToadError"):
        from toad import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
