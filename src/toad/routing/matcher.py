"""Trie-based path matcher.

Maps ``(method, pattern) -> payload`` registrations to lookups by
``(method, path)``. The router keeps two of these: one holding routes,
one holding each router node's base-path middleware stack.

Per segment, a literal child beats a parameter child, which beats the
trailing wildcard. Lookup backtracks, so a literal branch that dead-ends
deeper down still lets a parameter or wildcard branch match.
"""

from dataclasses import dataclass, field

from toad.routing.paths import parse_pattern, split_path
from toad.routing.route import Match


class _TrieNode[T]:
    """A node in the pattern trie."""

    __slots__ = ("children", "param_children", "payloads", "wildcard")

    def __init__(self) -> None:
        # Literal segment children: "users" -> node
        self.children: dict[str, _TrieNode[T]] = {}
        # Parameter children by name, tried in registration order
        self.param_children: dict[str, _TrieNode[T]] = {}
        # Trailing "*" registrations at this node
        self.wildcard: _WildcardEdge[T] | None = None
        # Payloads for a pattern ending exactly here, keyed by method
        self.payloads: dict[str, T] = {}


@dataclass(slots=True)
class _WildcardEdge[T]:
    """A trailing wildcard: consumes the rest of the path."""

    payloads: dict[str, T] = field(default_factory=dict)


class PathMatcher[T]:
    """Pattern registry with best-match lookup.

    Usage::

        matcher: PathMatcher[str] = PathMatcher()
        matcher.register("GET", "/users/:id", "user")
        matcher.register("GET", "/files/*", "file")
        matcher.find("GET", "/users/42")    # Match(payload="user", parameters={"id": "42"})
        matcher.find("GET", "/files/a/b")   # Match(payload="file", parameters={"*": "a/b"})

    Registering the same ``(method, pattern)`` twice replaces the
    earlier payload.
    """

    __slots__ = ("_root",)

    def __init__(self) -> None:
        self._root: _TrieNode[T] = _TrieNode()

    def register(self, method: str, pattern: str, payload: T) -> None:
        """Add *payload* under ``(method, pattern)``.

        Raises ``ConfigurationError`` if the pattern is malformed.
        """
        method = method.upper()
        node = self._root
        for seg in parse_pattern(pattern):
            if seg.kind == "wildcard":
                if node.wildcard is None:
                    node.wildcard = _WildcardEdge()
                node.wildcard.payloads[method] = payload
                return
            if seg.kind == "param":
                node = node.param_children.setdefault(seg.name, _TrieNode())
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        node.payloads[method] = payload

    def find(self, method: str, path: str) -> Match[T] | None:
        """Best match for *path* under *method*, or ``None``."""
        return self._match_node(self._root, method.upper(), split_path(path), 0, {})

    def _match_node(
        self,
        node: _TrieNode[T],
        method: str,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> Match[T] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed: an exact registration wins over a wildcard
        if index == len(parts):
            if method in node.payloads:
                return Match(payload=node.payloads[method], parameters=params)
            if node.wildcard is not None and method in node.wildcard.payloads:
                return Match(
                    payload=node.wildcard.payloads[method],
                    parameters={**params, "*": ""},
                )
            return None

        part = parts[index]

        # 1. Literal child
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, method, parts, index + 1, params)
            if result is not None:
                return result

        # 2. Parameter children
        for name, param_child in node.param_children.items():
            result = self._match_node(
                param_child, method, parts, index + 1, {**params, name: part}
            )
            if result is not None:
                return result

        # 3. Trailing wildcard
        if node.wildcard is not None and method in node.wildcard.payloads:
            return Match(
                payload=node.wildcard.payloads[method],
                parameters={**params, "*": "/".join(parts[index:])},
            )

        return None

    def entries(self) -> list[tuple[str, str, T]]:
        """All registrations as ``(method, normalized pattern, payload)``, sorted."""
        found: list[tuple[str, str, T]] = []
        self._collect(self._root, [], found)
        return sorted(found, key=lambda item: (item[1], item[0]))

    def _collect(
        self,
        node: _TrieNode[T],
        parts: list[str],
        found: list[tuple[str, str, T]],
    ) -> None:
        path = "/" + "/".join(parts)
        found.extend((method, path, payload) for method, payload in node.payloads.items())
        if node.wildcard is not None:
            wildcard_path = "/" + "/".join([*parts, "*"])
            found.extend(
                (method, wildcard_path, payload) for method, payload in node.wildcard.payloads.items()
            )
        for seg, child in node.children.items():
            self._collect(child, [*parts, seg], found)
        for name, child in node.param_children.items():
            self._collect(child, [*parts, f":{name}"], found)
