"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response, so a response is
built up one call at a time.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from toad.http.headers import MutableHeaders

if TYPE_CHECKING:
    from toad.context import Context

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Header lookup --

    def header(self, name: str) -> str | None:
        """Comma-joined value of every header named *name*, or ``None``."""
        key = name.lower()
        values = [v for n, v in self.headers if n.lower() == key]
        return ", ".join(values) if values else None

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)


@dataclass(slots=True)
class ResponseInit:
    """Response primitives accumulated by middleware before a handler runs.

    Lives in ``ctx.locals["response"]`` once ``with_response()`` has run.
    The headers are mutable: ``set_header`` and
    ``append_header`` write into the same object the handler later reads.
    """

    headers: MutableHeaders = field(default_factory=MutableHeaders)


def json_body(body: Any, status: int = 200, *, headers: Mapping[str, str] | None = None) -> Response:
    """Serialize *body* as a JSON ``Response``.

    Usage::

        return json_body({"ok": True}, 201)
    """
    return Response(
        body=json_module.dumps(body),
        status=status,
        content_type=JSON_CONTENT_TYPE,
        headers=tuple(headers.items()) if headers else (),
    )


def json_response(
    ctx: Context[Any] | None,
    body: Any,
    status: int = 200,
    *,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Create a JSON response, picking up headers prepared by middleware.

    If the context locals have a ``response`` entry (see
    ``with_response()``), its headers are used. Passing *headers*
    explicitly overrides them entirely::

        router = (
            create_router()
            .use(with_response())
            .use(set_header(lambda ctx: ("x-served-by", "toad")))
            .get("/", lambda ctx: json_response(ctx, {"ok": True}))
        )
    """
    if headers is not None:
        return json_body(body, status, headers=headers)
    prepared = _prepared_headers(ctx.locals if ctx is not None else None)
    response = json_body(body, status)
    if prepared is None:
        return response
    return replace(response, headers=prepared.items())


def _prepared_headers(locals_: Any) -> MutableHeaders | None:
    if not isinstance(locals_, Mapping):
        return None
    init = locals_.get("response")
    if isinstance(init, ResponseInit):
        return init.headers
    return None
