"""The per-step context threaded through the middleware chain.

A ``Context`` is never mutated. Each call to ``next(locals)`` produces
a new one for the next middleware via ``with_locals``, and the terminal
step builds the handler's context with the route's own parameters.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from toad.http.request import Request


@dataclass(frozen=True, slots=True)
class Context[L]:
    """What a middleware or handler sees of the current request.

    Attributes:
        request: The request being dispatched.
        matched_route: The pattern of the matched route (as written at
            registration, before normalization), or ``None`` when no
            route matched.
        locals: Request-scoped values accumulated by middleware. Opaque
            to the chain: whatever one middleware passes to ``next`` is
            exactly what the next one receives.
        parameters: Path parameters. Middleware see the parameters of
            the base-path match; handlers see the route's own.
    """

    request: Request
    matched_route: str | None
    locals: L
    parameters: Mapping[str, str]

    def with_locals[M](self, locals: M) -> Context[M]:  # noqa: A002
        """Return a copy carrying *locals* instead."""
        return replace(self, locals=locals)  # type: ignore[return-value]
