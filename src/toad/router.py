"""Router builder and dispatch entry point.

A ``Router`` accumulates middleware (``use``) and routes (``get``,
``post``, ...) and forks sub-routers (``route``). Every node descended
from one root shares the same route table, so ``handle`` on the root
sees routes registered anywhere in the tree.

Two rules make composition predictable:

- A route captures a *copy* of its node's middleware stack when it is
  registered. Middleware added later never reaches it.
- A sub-router starts from a *copy* of its parent's stack. Neither side
  sees the other's later ``use`` calls.

Registration is meant to finish before the first ``handle``. Mutating
a router afterwards is not guarded against: routes registered earlier
keep their old stacks while new ones see the changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import anyio

from toad.config import RouterConfig
from toad.context import Context
from toad.errors import ConfigurationError, RoutingInvariantError
from toad.http.request import Request
from toad.http.response import Response, json_body
from toad.middleware.chain import run_chain
from toad.middleware.protocol import Handler, MaybeAwaitable, Middleware
from toad.routing.matcher import PathMatcher
from toad.routing.paths import normalize_path
from toad.routing.route import Match, Route

logger = logging.getLogger("toad.router")

HTTP_METHODS = frozenset(
    {"CONNECT", "DELETE", "GET", "OPTIONS", "PATCH", "POST", "PUT", "TRACE"}
)

# Base-path stacks apply whatever the request method is.
_ANY_METHOD = "ANY"


def create_router(config: RouterConfig | None = None) -> Router:
    """Create a new root router.

    Usage::

        router = (
            create_router()
            .use(create_middleware(lambda ctx: {"user": "anonymous"}))
            .get("/", lambda ctx: json_body(ctx.locals))
        )
        response = await router.handle(Request.build("GET", "http://example.com/"))
    """
    return Router(config=config)


class Router:
    """A router node: a base path, a working middleware stack, shared tables.

    Build the root with ``create_router()``; build children with
    ``route()``. Every builder method returns the node it was called on.
    """

    __slots__ = ("_base_path", "_config", "_routes", "_stack", "_stacks")

    def __init__(
        self,
        base_path: str = "",
        stack: list[Middleware] | None = None,
        *,
        routes: PathMatcher[Route] | None = None,
        stacks: PathMatcher[list[Middleware]] | None = None,
        config: RouterConfig | None = None,
    ) -> None:
        self._base_path = base_path
        self._stack: list[Middleware] = stack if stack is not None else []
        self._routes: PathMatcher[Route] = routes if routes is not None else PathMatcher()
        self._stacks: PathMatcher[list[Middleware]] = (
            stacks if stacks is not None else PathMatcher()
        )
        self._config = config or RouterConfig()

        # The live list, not a copy: middleware added later with use()
        # must still run for unmatched requests under this prefix.
        self._stacks.register(_ANY_METHOD, base_path, self._stack)
        self._stacks.register(_ANY_METHOD, f"{base_path}/*", self._stack)

    def __repr__(self) -> str:
        return f"Router(base_path={self._base_path!r}, middleware={len(self._stack)})"

    # -- Introspection --

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def stack(self) -> tuple[Middleware, ...]:
        """Snapshot of this node's current middleware stack."""
        return tuple(self._stack)

    @property
    def routes(self) -> list[Route]:
        """Every route in the shared table, sorted by path then method."""
        return [route for _, _, route in self._routes.entries()]

    # -- Building --

    def use(self, middleware: Middleware) -> Router:
        """Append *middleware* to this node's stack.

        Affects routes registered on this node from now on, and
        sub-routers forked from now on. Nothing else.
        """
        self._stack.append(middleware)
        return self

    def add(self, method: str, path: str, handler: Handler) -> Router:
        """Register *handler* for *method* at ``base_path + path``.

        Registering the same method and path again replaces the earlier
        route. Raises ``ConfigurationError`` for an unknown method or a
        malformed pattern.
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            msg = f"Unsupported HTTP method {method!r}"
            raise ConfigurationError(msg)
        pattern = f"{self._base_path}{path}"
        route = Route(
            method=method,
            pattern=pattern,
            handler=handler,
            stack=tuple(self._stack),
        )
        self._routes.register(method, normalize_path(pattern), route)
        logger.debug("Registered %s %s (%d middleware)", method, pattern, len(route.stack))
        return self

    def get(self, path: str, handler: Handler) -> Router:
        return self.add("GET", path, handler)

    def post(self, path: str, handler: Handler) -> Router:
        return self.add("POST", path, handler)

    def put(self, path: str, handler: Handler) -> Router:
        return self.add("PUT", path, handler)

    def patch(self, path: str, handler: Handler) -> Router:
        return self.add("PATCH", path, handler)

    def delete(self, path: str, handler: Handler) -> Router:
        return self.add("DELETE", path, handler)

    def connect(self, path: str, handler: Handler) -> Router:
        return self.add("CONNECT", path, handler)

    def options(self, path: str, handler: Handler) -> Router:
        return self.add("OPTIONS", path, handler)

    def trace(self, path: str, handler: Handler) -> Router:
        return self.add("TRACE", path, handler)

    def route(self, path: str, configure: Callable[[Router], Any]) -> Router:
        """Mount a sub-router at ``base_path + path`` and configure it.

        The child gets a copy of this node's current stack and shares
        the route table. *configure* receives the child; its return
        value is ignored, so both styles work::

            router.route("/admin", lambda admin: admin.use(auth).get("/", dashboard))

            def configure(admin: Router) -> None:
                admin.use(auth)
                admin.get("/", dashboard)

            router.route("/admin", configure)
        """
        child = Router(
            f"{self._base_path}{path}",
            list(self._stack),
            routes=self._routes,
            stacks=self._stacks,
            config=self._config,
        )
        logger.debug("Mounted sub-router at %s", child.base_path)
        configure(child)
        return self

    # -- Dispatch --

    async def handle(self, request: Request) -> Response:
        """Dispatch *request* through the middleware chain to a handler.

        Exceptions raised by middleware or handlers propagate unchanged.
        Raises ``RoutingInvariantError`` if no middleware stack applies
        to the path, which only happens if the router was built wrong.
        """
        method = request.method.upper()
        path = normalize_path(request.path)

        route_match = self._routes.find(method, path)
        stack_match = self._stacks.find(_ANY_METHOD, path)

        if route_match is not None:
            stack: tuple[Middleware, ...] = route_match.payload.stack
        elif stack_match is not None:
            stack = tuple(stack_match.payload)
        else:
            raise RoutingInvariantError(method, path)

        ctx: Context[Any] = Context(
            request=request,
            matched_route=route_match.payload.pattern if route_match is not None else None,
            locals={},
            parameters=stack_match.parameters if stack_match is not None else {},
        )
        return await run_chain(stack, self._terminal(request, method, path, route_match), ctx)

    def handle_sync(self, request: Request) -> Response:
        """Blocking ``handle`` for callers without an event loop.

        Runs the dispatch on a fresh event loop via ``anyio.run``. Do
        not call it from inside a running loop.
        """
        return anyio.run(self.handle, request)

    def _terminal(
        self,
        request: Request,
        method: str,
        path: str,
        route_match: Match[Route] | None,
    ) -> Callable[[Any], MaybeAwaitable[Response]]:
        """The innermost step: call the matched handler, or produce a 404."""

        def terminal(locals_: Any) -> MaybeAwaitable[Response]:
            if route_match is None:
                logger.debug("No route for %s %s", method, path)
                return json_body({"message": self._config.not_found_message}, 404)
            route = route_match.payload
            return route.handler(
                Context(
                    request=request,
                    matched_route=route.pattern,
                    locals=locals_,
                    parameters=route_match.parameters,
                )
            )

        return terminal
