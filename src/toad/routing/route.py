"""Route, Match and PathSegment frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

type SegmentKind = Literal["static", "param", "wildcard"]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:   ``/users``  (kind="static", name="")
    Param:    ``/:id``    (kind="param", name="id")
    Wildcard: ``/*``      (kind="wildcard", name="*")
    """

    value: str
    kind: SegmentKind = "static"
    name: str = ""


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Immutable once created.

    ``stack`` is a snapshot of the registering router's middleware at
    registration time; ``use`` calls made afterwards never reach it.
    """

    method: str
    pattern: str
    handler: Callable[..., Any]
    stack: tuple[Callable[..., Any], ...] = ()


@dataclass(frozen=True, slots=True)
class Match[T]:
    """Result of a successful lookup in a ``PathMatcher``."""

    payload: T
    parameters: Mapping[str, str] = field(default_factory=dict)
