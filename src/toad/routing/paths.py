"""Path normalization and pattern parsing.

Registration and dispatch both go through ``normalize_path`` so that a
route registered as ``/foo//bar/`` is found by a request for
``/foo/bar`` and vice versa.
"""

import re

from toad.errors import ConfigurationError
from toad.routing.route import PathSegment

_REPEATED_SLASHES = re.compile(r"/+")
_BRACE_PARAM = re.compile(r"^\{[^}]*\}$")

WILDCARD = "*"


def normalize_path(path: str) -> str:
    """Canonical form of a path or pattern.

    Ensures a leading ``/``, collapses repeated separators and strips a
    trailing separator, except for the root path itself::

        normalize_path("")            -> "/"
        normalize_path("foo//bar/")   -> "/foo/bar"
    """
    path = _REPEATED_SLASHES.sub("/", "/" + path).rstrip("/")
    return path or "/"


def split_path(path: str) -> list[str]:
    """Non-empty segments of a normalized path (``"/"`` has none)."""
    return [part for part in path.split("/") if part]


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", kind="param", name="id")]
        "/files/*"        -> [PathSegment("files"), PathSegment("*", kind="wildcard", name="*")]

    Raises ``ConfigurationError`` for an empty parameter name, a
    wildcard that is not the last segment, or ``{param}`` syntax.
    """
    parts = split_path(normalize_path(pattern))
    segments: list[PathSegment] = []
    for i, part in enumerate(parts):
        if part == WILDCARD:
            if i != len(parts) - 1:
                msg = f"Wildcard '*' must be the last segment in {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, kind="wildcard", name=WILDCARD))
        elif part.startswith(":"):
            name = part[1:]
            if not name:
                msg = f"Empty parameter name in {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, kind="param", name=name))
        elif _BRACE_PARAM.match(part):
            msg = (
                f"Route pattern {pattern!r} uses {{param}} syntax. "
                f"Toad expects :param segments, e.g. '/users/:id'."
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return segments


def pattern_params(pattern: str) -> tuple[str, ...]:
    """Names a pattern binds, in order: ``"/a/:x/*"`` -> ``("x", "*")``."""
    return tuple(seg.name for seg in parse_pattern(pattern) if seg.kind != "static")
