"""Tests for toad.http: headers, query params, request and response types."""

import pytest

from toad.http.headers import Headers, MutableHeaders
from toad.http.query import QueryParams
from toad.http.request import Request
from toad.http.response import Response, json_body, json_response


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers({"Content-Type": "text/html"})
        assert headers["content-type"] == "text/html"
        assert headers.get("CONTENT-TYPE") == "text/html"
        assert "Content-type" in headers

    def test_missing(self) -> None:
        headers = Headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "fallback") == "fallback"
        with pytest.raises(KeyError):
            headers["x-missing"]

    def test_multi_value(self) -> None:
        headers = Headers([("Cookie", "a=1"), ("cookie", "b=2")])
        assert headers["cookie"] == "a=1"
        assert headers.get_list("COOKIE") == ["a=1", "b=2"]
        assert len(headers) == 1

    def test_from_raw(self) -> None:
        headers = Headers.from_raw([(b"host", b"example.com"), (b"x-id", b"7")])
        assert headers["Host"] == "example.com"
        assert list(headers) == ["host", "x-id"]

    def test_immutable(self) -> None:
        headers = Headers({"a": "1"})
        with pytest.raises(AttributeError):
            headers.extra = "x"  # type: ignore[attr-defined]


class TestMutableHeaders:
    def test_set_replaces(self) -> None:
        headers = MutableHeaders()
        headers.append("Foo", "a")
        headers.append("foo", "b")
        headers.set("FOO", "c")
        assert headers.get_list("foo") == ["c"]

    def test_append_and_join(self) -> None:
        headers = MutableHeaders([("Vary", "Accept")])
        headers.append("vary", "Origin")
        assert headers.get("VARY") == "Accept, Origin"
        assert headers.items() == (("vary", "Accept"), ("vary", "Origin"))

    def test_delete(self) -> None:
        headers = MutableHeaders({"a": "1", "b": "2"})
        headers.delete("A")
        assert "a" not in headers
        assert "b" in headers
        assert len(headers) == 1

    def test_get_default(self) -> None:
        assert MutableHeaders().get("x", "none") == "none"


class TestQueryParams:
    def test_parse(self) -> None:
        query = QueryParams("q=toad&tag=a&tag=b&empty=")
        assert query["q"] == "toad"
        assert query.get_list("tag") == ["a", "b"]
        assert query.get("empty") == ""
        assert query.get("missing") is None
        assert str(query) == "q=toad&tag=a&tag=b&empty="

    def test_keys_in_order_without_duplicates(self) -> None:
        query = QueryParams("b=1&a=2&b=3")
        assert list(query) == ["b", "a"]
        assert len(query) == 2
        assert "a" in query
        assert "c" not in query


class TestRequest:
    def test_build_uppercases_method(self) -> None:
        request = Request.build("post", "http://example.com/items")
        assert request.method == "POST"

    def test_path_strips_query_and_host(self) -> None:
        request = Request.build("GET", "http://example.com/foo/bar?x=1#frag")
        assert request.path == "/foo/bar"
        assert request.query["x"] == "1"

    def test_path_of_bare_host(self) -> None:
        assert Request.build("GET", "http://example.com").path == ""

    def test_relative_url(self) -> None:
        request = Request.build("GET", "/search?q=a")
        assert request.path == "/search"
        assert request.query.get("q") == "a"

    def test_leading_double_slash_is_a_path(self) -> None:
        request = Request.build("GET", "//foo//bar?x=1#top")
        assert request.path == "//foo//bar"
        assert request.query["x"] == "1"

    def test_raw_path_wins_over_url(self) -> None:
        request = Request("GET", "http://example.com/elsewhere", raw_path="/users")
        assert request.path == "/users"

    def test_body_helpers(self) -> None:
        request = Request.build(
            "POST",
            "/items",
            headers={"Content-Type": "application/json"},
            body='{"name": "toad"}',
        )
        assert request.body == b'{"name": "toad"}'
        assert request.text() == '{"name": "toad"}'
        assert request.json() == {"name": "toad"}
        assert request.content_type == "application/json"

    def test_from_asgi(self) -> None:
        scope = {
            "type": "http",
            "method": "GET",
            "scheme": "https",
            "path": "/users/42",
            "root_path": "",
            "query_string": b"full=1",
            "headers": [(b"host", b"api.example.com")],
        }
        request = Request.from_asgi(scope)
        assert request.url == "https://api.example.com/users/42?full=1"
        assert request.path == "/users/42"
        assert request.headers["host"] == "api.example.com"

    def test_from_asgi_without_host_header(self) -> None:
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/",
            "headers": [],
            "server": ("127.0.0.1", 8000),
        }
        request = Request.from_asgi(scope, b"payload")
        assert request.url == "http://127.0.0.1:8000/"
        assert request.body == b"payload"


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body_bytes == b""
        assert response.content_type.startswith("text/plain")

    def test_chaining_returns_new_instances(self) -> None:
        base = Response("hi")
        changed = base.with_status(201).with_header("X-A", "1").with_headers({"X-B": "2"})
        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 201
        assert changed.headers == (("X-A", "1"), ("X-B", "2"))

    def test_header_lookup(self) -> None:
        response = Response(headers=(("Set-Cookie", "a=1"), ("set-cookie", "b=2")))
        assert response.header("SET-COOKIE") == "a=1, b=2"
        assert response.header("x-missing") is None

    def test_text_and_bytes(self) -> None:
        assert Response(b"caf\xc3\xa9").text == "café"
        assert Response("café").body_bytes == b"caf\xc3\xa9"

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/html").content_type == "text/html"


class TestJsonHelpers:
    def test_json_body(self) -> None:
        response = json_body({"ok": True}, 201, headers={"x-id": "1"})
        assert response.status == 201
        assert response.content_type == "application/json"
        assert response.json() == {"ok": True}
        assert response.header("x-id") == "1"

    def test_json_response_without_context(self) -> None:
        response = json_response(None, [1, 2, 3])
        assert response.json() == [1, 2, 3]
        assert response.headers == ()


class TestRequestFromAsgi:
    def _scope(self, path: str, *, host: str | None = None, root_path: str = "") -> dict:
        headers = [(b"host", host.encode("latin-1"))] if host is not None else []
        return {
            "type": "http",
            "method": "GET",
            "path": path,
            "root_path": root_path,
            "query_string": b"",
            "headers": headers,
            "server": ("10.0.0.1", 8080),
        }

    @pytest.mark.parametrize(
        "host",
        ["example.com?", "example.com#frag", "example.com/admin", "user@example.com", "a b"],
    )
    def test_hostile_host_does_not_change_path(self, host: str) -> None:
        request = Request.from_asgi(self._scope("/users", host=host))
        assert request.path == "/users"
        assert request.url == "http://10.0.0.1:8080/users"

    def test_host_with_port_kept(self) -> None:
        request = Request.from_asgi(self._scope("/", host="example.com:8443"))
        assert request.url == "http://example.com:8443/"

    def test_ipv6_host_kept(self) -> None:
        request = Request.from_asgi(self._scope("/", host="[::1]:8000"))
        assert request.url == "http://[::1]:8000/"

    def test_root_path_not_prepended_twice(self) -> None:
        request = Request.from_asgi(self._scope("/api/users", root_path="/api"))
        assert request.path == "/api/users"
        assert request.url == "http://10.0.0.1:8080/api/users"

    def test_decoded_question_mark_stays_in_path(self) -> None:
        request = Request.from_asgi(self._scope("/files/what?.txt", host="example.com"))
        assert request.path == "/files/what?.txt"
        assert request.url == "http://example.com/files/what%3F.txt"
        assert len(request.query) == 0
