"""Immutable HTTP request.

The request is honest about what it is: received data that doesn't
change. The body is read fully by whoever builds the request (the ASGI
adapter, a test) before dispatch begins.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
import re
from typing import Any
from urllib.parse import quote, urlsplit

from toad.http.headers import Headers
from toad.http.query import QueryParams

# A bare hostname, IPv4 address or bracketed IPv6 address, with an optional port.
_VALID_HOST = re.compile(r"(?:[A-Za-z0-9.-]+|\[[0-9A-Fa-f:.]+\])(?::\d+)?")

# Characters left unescaped when a decoded ASGI path is put back into a URL.
_PATH_SAFE = "/:@!$&'()*+,;=-._~"


def _split_target(url: str) -> tuple[str, str]:
    """Path and query string of *url*.

    A URL that starts with ``/`` is a request target, never a
    scheme-relative URL: ``//foo/bar`` is the path ``//foo/bar``.
    """
    if url.startswith("/"):
        target = url.partition("#")[0]
        path, _, query = target.partition("?")
        return path, query
    parts = urlsplit(url)
    return parts.path, parts.query


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Only ``method``, ``url`` and ``headers`` are needed for dispatch.
    ``url`` may be absolute (``http://example.com/foo?x=1``) or just a
    path with an optional query string (``/foo?x=1``).

    ``raw_path`` is the request target's path as the server received it
    (``scope["path"]`` under ASGI). When set, it is the path the router
    matches on, and ``url`` is only informational.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    raw_path: str | None = None

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The request path, without scheme, host, query or fragment.

        Not normalized: ``Router.handle`` collapses separators itself.
        """
        if self.raw_path is not None:
            return self.raw_path
        return _split_target(self.url)[0]

    @property
    def query(self) -> QueryParams:
        return QueryParams(_split_target(self.url)[1])

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Body access --

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
    ) -> Request:
        """Create a Request from plain Python values.

        Usage::

            Request.build("POST", "http://example.com/items", body='{"a": 1}')
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(method=method.upper(), url=url, headers=Headers(headers), body=body)

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> Request:
        """Create a Request from an ASGI HTTP scope and its fully read body.

        Routing uses ``scope["path"]`` as is. It already includes any
        ``root_path`` prefix. The ``Host`` header only feeds ``url``, and
        is replaced by the server address when it is not a plain host.
        """
        headers = Headers.from_raw(scope.get("headers", ()))
        path = scope["path"]
        scheme = scope.get("scheme", "http")
        host = headers.get("host")
        if host is None or not _VALID_HOST.fullmatch(host):
            server = scope.get("server")
            host = f"{server[0]}:{server[1]}" if server else "localhost"
        url = f"{scheme}://{host}{quote(path, safe=_PATH_SAFE)}"
        query_string = scope.get("query_string", b"")
        if query_string:
            url = f"{url}?{query_string.decode('latin-1')}"
        return cls(method=scope["method"], url=url, headers=headers, body=body, raw_path=path)
