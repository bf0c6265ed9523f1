"""Toad exception hierarchy.

Shared across the matcher, Router and adapters so every module raises
and catches the same types. Handler and middleware exceptions are never
wrapped in these: they propagate out of ``Router.handle`` untouched.
"""


class ToadError(Exception):
    """Base for all toad-specific errors."""


class ConfigurationError(ToadError):
    """Raised when a route, pattern or base path is invalid.

    Always raised at registration time, never during dispatch.
    """


class RoutingInvariantError(ToadError):
    """Raised when no middleware stack can be resolved for a request.

    Every router node registers its own base path, so the root's
    ``/*`` registration should catch any path. Hitting this means the
    router was built incorrectly. It is not a 404.
    """

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No middleware stack registered for {method} {path!r}")
        self.method = method
        self.path = path
